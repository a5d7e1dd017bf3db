r"""Callback manager for orchestrating attempt lifecycle events."""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING

from saasrest.callbacks import (
    FailureInfo,
    invoke_on_request,
    invoke_on_retry,
    invoke_on_success,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from saasrest.callbacks import RequestInfo, ResponseInfo, RetryInfo
    from saasrest.response import Response


class CallbackManager:
    """Manages callback invocations during the attempt loop.

    Args:
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry wait.
        on_success: Optional callback invoked when the call succeeds.
        on_failure: Optional callback invoked when the call fails.
    """

    def __init__(
        self,
        on_request: Callable[[RequestInfo], None] | None = None,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_success: Callable[[ResponseInfo], None] | None = None,
        on_failure: Callable[[FailureInfo], None] | None = None,
    ) -> None:
        self._on_request = on_request
        self._on_retry = on_retry
        self._on_success = on_success
        self._on_failure = on_failure

    def on_request(self, url: str, method: str, attempt: int, max_retries: int) -> None:
        """Invoke on_request callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: Current attempt number (0-indexed).
            max_retries: Maximum number of retries.
        """
        invoke_on_request(
            self._on_request, url=url, method=method, attempt=attempt, max_retries=max_retries
        )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        sleep_time: float,
        error: Exception | None,
        status_code: int | None,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: The retry number (1-indexed).
            max_retries: Maximum number of retries.
            sleep_time: Delay before the retry.
            error: Error that triggered the retry.
            status_code: Status code that triggered the retry (if any).
        """
        invoke_on_retry(
            self._on_retry,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            wait_time=sleep_time,
            error=error,
            status_code=status_code,
        )

    def on_success(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        response: Response,
        start_time: float,
    ) -> None:
        """Invoke on_success callback.

        Args:
            url: The URL that was requested.
            method: The HTTP method.
            attempt: Attempt number that succeeded (0-indexed).
            max_retries: Maximum number of retries.
            response: The successful response.
            start_time: ``time.monotonic()`` value when the call started.
        """
        invoke_on_success(
            self._on_success,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            response=response,
            start_time=start_time,
        )

    def on_failure(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        error: Exception,
        status_code: int | None,
        start_time: float,
    ) -> None:
        """Invoke on_failure callback.

        Args:
            url: The URL that was requested.
            method: The HTTP method.
            attempt: Final attempt number (0-indexed).
            max_retries: Maximum number of retries.
            error: The terminal error.
            status_code: Status code if available.
            start_time: ``time.monotonic()`` value when the call started.
        """
        if self._on_failure is not None:
            self._on_failure(
                FailureInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error=error,
                    status_code=status_code,
                    total_time=time.monotonic() - start_time,
                )
            )
