r"""Classification of completed attempts.

The upstream APIs report "resource already provisioned" either with a
409, or with a 500 whose body mentions it. Both are treated as success
so that configuring idempotent infrastructure can be re-run safely.

Decision table, in priority order:

====================================  ============
Condition                             Verdict
====================================  ============
200 <= status < 300                   SUCCESS
status == 409                         SUCCESS
status == 500 and a marker in body    SUCCESS
status >= 500 or status == 429        RETRYABLE
400 <= status < 500                   CLIENT_ERROR
anything else                         UNEXPECTED
====================================  ============
"""

from __future__ import annotations

__all__ = ["ResponseClassifier", "Verdict", "classify_status"]

import enum
import logging
from typing import TYPE_CHECKING

from saasrest.core.config import DEFAULT_IDEMPOTENCY_MARKERS
from saasrest.exceptions import (
    ClientError,
    RetriesExhaustedError,
    ServerError,
    TransportError,
    UnexpectedStatusError,
)
from saasrest.retry.outcome import RetryableFailure, Success, TerminalFailure

if TYPE_CHECKING:
    from collections.abc import Iterable

    from saasrest.response import Response
    from saasrest.retry.outcome import Outcome

# Maximum number of body characters copied into error messages
_BODY_SNIPPET_SIZE = 200


class Verdict(enum.Enum):
    """Classification of a response status."""

    SUCCESS = "success"
    RETRYABLE = "retryable"
    CLIENT_ERROR = "client_error"
    UNEXPECTED = "unexpected"


def classify_status(
    status_code: int,
    body: bytes,
    markers: Iterable[str] = DEFAULT_IDEMPOTENCY_MARKERS,
) -> Verdict:
    r"""Classify a response from its status code and body.

    Args:
        status_code: The HTTP status code.
        body: The raw response body.
        markers: Body fragments of a 500 response meaning the resource
            already exists.

    Returns:
        The verdict.

    Example:
        ```pycon
        >>> from saasrest.retry.classifier import classify_status
        >>> classify_status(409, b"")
        <Verdict.SUCCESS: 'success'>
        >>> classify_status(500, b"index already exists")
        <Verdict.SUCCESS: 'success'>
        >>> classify_status(500, b"internal failure")
        <Verdict.RETRYABLE: 'retryable'>
        >>> classify_status(404, b"")
        <Verdict.CLIENT_ERROR: 'client_error'>

        ```
    """
    if 200 <= status_code < 300:
        return Verdict.SUCCESS
    if status_code == 409:
        return Verdict.SUCCESS
    if status_code == 500 and _contains_marker(body, markers):
        return Verdict.SUCCESS
    if status_code >= 500 or status_code == 429:
        return Verdict.RETRYABLE
    if 400 <= status_code < 500:
        return Verdict.CLIENT_ERROR
    return Verdict.UNEXPECTED


def _contains_marker(body: bytes, markers: Iterable[str]) -> bool:
    return any(marker.encode("utf-8") in body for marker in markers)


def _snippet(response: Response) -> str:
    text = response.as_text()
    if len(text) > _BODY_SNIPPET_SIZE:
        return text[:_BODY_SNIPPET_SIZE] + "..."
    return text


class ResponseClassifier:
    r"""Map an attempt to its ``Outcome``.

    Args:
        markers: Body fragments of a 500 response meaning the resource
            already exists.
        logger: Optional logger receiving the diagnostic messages.
            Defaults to this module's logger.

    Example:
        ```pycon
        >>> from saasrest.response import Response
        >>> from saasrest.retry.classifier import ResponseClassifier
        >>> classifier = ResponseClassifier()
        >>> outcome = classifier.classify_response(
        ...     Response(status_code=409),
        ...     attempt=0,
        ...     max_retries=3,
        ...     method="POST",
        ...     url="https://api.example.com/indexes",
        ... )
        >>> type(outcome).__name__
        'Success'

        ```
    """

    def __init__(
        self,
        markers: Iterable[str] = DEFAULT_IDEMPOTENCY_MARKERS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.markers = tuple(markers)
        self._logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(markers={self.markers})"

    def classify_response(
        self,
        response: Response,
        attempt: int,
        max_retries: int,
        method: str,
        url: str,
    ) -> Outcome:
        """Classify a received response.

        Args:
            response: The response of the attempt.
            attempt: Current attempt number (0-indexed).
            max_retries: Maximum number of retries.
            method: The HTTP method being used.
            url: The URL being requested.

        Returns:
            ``Success``, ``RetryableFailure`` while attempts remain, or
            ``TerminalFailure`` with the response attached.
        """
        status_code = response.status_code
        verdict = classify_status(status_code, response.body, self.markers)

        if verdict is Verdict.SUCCESS:
            if not response.is_success():
                self._logger.info(
                    f"{method} request to {url} returned {status_code}, "
                    f"resource already exists: {_snippet(response)}"
                )
            return Success(response)

        if verdict is Verdict.RETRYABLE:
            error = ServerError(
                method=method,
                url=url,
                message=(
                    f"{method} request to {url} failed with server error "
                    f"{status_code}: {_snippet(response)}"
                ),
                status_code=status_code,
                response=response,
            )
            if attempt < max_retries:
                return RetryableFailure(
                    reason=f"status {status_code}", error=error, response=response
                )
            exhausted = RetriesExhaustedError(
                method=method,
                url=url,
                message=(
                    f"{method} request to {url} failed with status {status_code} "
                    f"after {attempt + 1} attempts"
                ),
                status_code=status_code,
                response=response,
                cause=error,
            )
            exhausted.__cause__ = error
            return TerminalFailure(error=exhausted, response=response)

        if verdict is Verdict.CLIENT_ERROR:
            self._logger.debug(
                f"{method} request to {url} failed with non-retryable status {status_code}"
            )
            return TerminalFailure(
                error=ClientError(
                    method=method,
                    url=url,
                    message=(
                        f"{method} request to {url} failed with client error "
                        f"{status_code}: {_snippet(response)}"
                    ),
                    status_code=status_code,
                    response=response,
                ),
                response=response,
            )

        return TerminalFailure(
            error=UnexpectedStatusError(
                method=method,
                url=url,
                message=(
                    f"{method} request to {url} returned unexpected status "
                    f"{status_code}: {_snippet(response)}"
                ),
                status_code=status_code,
                response=response,
            ),
            response=response,
        )

    def classify_exception(
        self,
        exception: Exception,
        attempt: int,
        max_retries: int,
        method: str,
        url: str,
    ) -> Outcome:
        """Classify a transport level failure.

        Transport failures are retried while attempts remain.

        Args:
            exception: The exception raised by the transport.
            attempt: Current attempt number (0-indexed).
            max_retries: Maximum number of retries.
            method: The HTTP method being used.
            url: The URL being requested.

        Returns:
            ``RetryableFailure`` while attempts remain, otherwise
            ``TerminalFailure`` wrapping the transport error.
        """
        error_type = type(exception).__name__
        error = TransportError(
            method=method,
            url=url,
            message=f"{method} request to {url} encountered {error_type}: {exception}",
            cause=exception,
        )
        error.__cause__ = exception
        if attempt < max_retries:
            return RetryableFailure(reason=error_type, error=error)
        exhausted = RetriesExhaustedError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed after {attempt + 1} attempts: {exception}",
            cause=error,
        )
        exhausted.__cause__ = error
        return TerminalFailure(error=exhausted)
