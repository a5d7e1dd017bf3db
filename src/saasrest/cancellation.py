r"""Cancellation and deadline signal for the wait between attempts."""

from __future__ import annotations

__all__ = ["CancellationToken"]

import threading
import time


class CancellationToken:
    r"""Thread-safe signal interrupting the wait between two attempts.

    The token fires when ``cancel()`` is called from any thread, or when
    its optional deadline passes.

    Args:
        deadline: Optional ``time.monotonic()`` value after which the
            token is considered cancelled.

    Example:
        ```pycon
        >>> from saasrest.cancellation import CancellationToken
        >>> token = CancellationToken()
        >>> token.is_cancelled
        False
        >>> token.cancel("shutting down")
        >>> token.is_cancelled, token.reason
        (True, 'shutting down')
        >>> token.wait(10.0)
        True

        ```
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline
        self._reason: str | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(cancelled={self.is_cancelled}, "
            f"deadline={self._deadline})"
        )

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        """Create a token that fires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def reason(self) -> str | None:
        """Why the token fired, or ``None`` while it has not."""
        if self._event.is_set():
            return self._reason
        if self._deadline_passed():
            return "deadline exceeded"
        return None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set() or self._deadline_passed()

    def cancel(self, reason: str = "cancelled") -> None:
        """Fire the token.

        Only the first reason is kept.
        """
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def wait(self, seconds: float) -> bool:
        """Block up to ``seconds`` or until the token fires.

        Args:
            seconds: The maximum wait in seconds.

        Returns:
            ``True`` if the token fired, ``False`` if the full delay
            elapsed.
        """
        timeout = max(seconds, 0.0)
        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining < timeout:
                self._event.wait(max(remaining, 0.0))
                return True
        return self._event.wait(timeout)

    def _deadline_passed(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline
