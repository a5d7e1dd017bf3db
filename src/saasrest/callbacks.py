r"""Callback types and data structures for observability.

Callbacks hook into the attempt loop for logging, metrics, or alerting:

- on_request: Called before each attempt
- on_retry: Called before each retry wait
- on_success: Called when a call succeeds
- on_failure: Called when a call fails with a terminal error

Example:
    ```pycon
    >>> from saasrest.callbacks import RetryInfo
    >>> from saasrest.core.config import ClientConfig
    >>> def log_retry(retry_info: RetryInfo) -> None:
    ...     print(f"Retry {retry_info.attempt}/{retry_info.max_retries + 1}")
    ...
    >>> config = ClientConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureInfo",
    "RequestInfo",
    "ResponseInfo",
    "RetryInfo",
    "invoke_on_request",
    "invoke_on_retry",
    "invoke_on_success",
]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from saasrest.response import Response


@dataclass
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The current attempt number (1-indexed). First attempt is 1.
        max_retries: Maximum number of retries configured.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt about to be made (1-indexed). First retry is attempt 2.
        max_retries: Maximum number of retries configured.
        wait_time: The delay in seconds before this retry.
        error: The error that triggered the retry.
        status_code: The HTTP status code that triggered the retry (if any).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    error: Exception | None
    status_code: int | None


@dataclass
class ResponseInfo:
    """Information passed to on_success callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number that succeeded (1-indexed).
        max_retries: Maximum number of retries configured.
        response: The successful response.
        total_time: Total time spent on all attempts including waits (seconds).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    response: Response
    total_time: float


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The final attempt number (1-indexed).
        max_retries: Maximum number of retries configured.
        error: The terminal error.
        status_code: The final HTTP status code (if any).
        total_time: Total time spent on all attempts including waits (seconds).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    error: Exception
    status_code: int | None
    total_time: float


def invoke_on_request(
    on_request: Callable[[RequestInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
) -> None:
    """Invoke on_request callback if provided.

    Args:
        on_request: Optional callback to invoke.
        url: The URL being requested.
        method: The HTTP method.
        attempt: The current attempt number (0-indexed).
        max_retries: Maximum number of retries.
    """
    if on_request is not None:
        on_request(RequestInfo(url=url, method=method, attempt=attempt + 1, max_retries=max_retries))


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    wait_time: float,
    error: Exception | None,
    status_code: int | None,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke.
        url: The URL being requested.
        method: The HTTP method.
        attempt: The retry number (1-indexed), so the upcoming attempt
            is ``attempt + 1``.
        max_retries: Maximum number of retries.
        wait_time: The delay before the retry.
        error: The error that triggered the retry.
        status_code: The status code that triggered the retry.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                max_retries=max_retries,
                wait_time=wait_time,
                error=error,
                status_code=status_code,
            )
        )


def invoke_on_success(
    on_success: Callable[[ResponseInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    response: Response,
    start_time: float,
) -> None:
    """Invoke on_success callback if provided.

    Args:
        on_success: Optional callback to invoke.
        url: The URL that was requested.
        method: The HTTP method.
        attempt: The attempt that succeeded (0-indexed).
        max_retries: Maximum number of retries.
        response: The successful response.
        start_time: ``time.monotonic()`` value when the call started.
    """
    if on_success is not None:
        on_success(
            ResponseInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                max_retries=max_retries,
                response=response,
                total_time=time.monotonic() - start_time,
            )
        )
