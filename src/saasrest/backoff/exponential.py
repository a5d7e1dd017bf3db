r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from saasrest.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates the delay as ``base_delay * exponent ** (attempt - 1)``,
    with an optional ``max_delay`` cap. The first retry always waits
    ``base_delay``.

    The exponent may be fractional: ``exponent=1.5`` grows the delay by
    50% per retry.

    Args:
        base_delay: The delay in seconds before the first retry.
        exponent: The growth factor between two successive retries.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from saasrest.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=5.0, exponent=2.0)
        >>> backoff.calculate(1)
        5.0
        >>> backoff.calculate(2)
        10.0
        >>> backoff.calculate(3)
        20.0
        >>> backoff = ExponentialBackoff(base_delay=5.0, exponent=2.0, max_delay=12.0)
        >>> backoff.calculate(3)
        12.0

        ```
    """

    def __init__(
        self, base_delay: float = 5.0, exponent: float = 2.0, max_delay: float | None = None
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if exponent < 0:
            msg = f"exponent must be non-negative, got {exponent}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.exponent = exponent
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"exponent={self.exponent}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The retry number (1-indexed).

        Returns:
            ``base_delay * exponent ** (attempt - 1)``, capped at
            ``max_delay`` if set.

        Raises:
            ValueError: if ``attempt`` is lower than 1.
            OverflowError: if the delay exceeds the float range and no
                ``max_delay`` is set.
        """
        if attempt < 1:
            msg = f"attempt must be >= 1, got {attempt}"
            raise ValueError(msg)
        if self.base_delay == 0:
            return 0.0
        try:
            delay = self.base_delay * self.exponent ** (attempt - 1)
        except OverflowError:
            if self.max_delay is None:
                raise
            return self.max_delay
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
