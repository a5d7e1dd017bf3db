r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from saasrest.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Wait the same delay before every retry.

    Args:
        delay: The delay in seconds.

    Example:
        ```pycon
        >>> from saasrest.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=2.0)
        >>> backoff.calculate(1), backoff.calculate(5)
        (2.0, 2.0)

        ```
    """

    def __init__(self, delay: float = 5.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)
        self.delay = delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay
