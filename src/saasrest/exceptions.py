r"""Exception hierarchy for resilient REST calls.

Every failure of a logical call is raised as a subclass of
``HttpRequestError``. When a response was actually received, it is
attached to the error so callers can inspect the status code and body
even on failure.
"""

from __future__ import annotations

__all__ = [
    "CancellationError",
    "ClientError",
    "DecodeError",
    "HttpRequestError",
    "RetriesExhaustedError",
    "SaasRestError",
    "SerializationError",
    "ServerError",
    "TransportError",
    "UnexpectedStatusError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from saasrest.response import Response


class SaasRestError(Exception):
    """Base class of all the errors raised by saasrest."""


class HttpRequestError(SaasRestError):
    r"""Raised when a logical HTTP call does not complete successfully.

    Args:
        method: The HTTP method of the failed call.
        url: The URL of the failed call.
        message: A human readable description of the failure.
        status_code: The status code of the last received response,
            if any.
        response: The last received response, if any.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from saasrest.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET", url="https://api.example.com/indexes", message="boom"
        ... )
        >>> error.method, error.status_code
        ('GET', None)

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class SerializationError(HttpRequestError):
    """Raised when the request body cannot be encoded.

    This is a caller bug and is never retried.
    """


class TransportError(HttpRequestError):
    """Raised for connection level failures (refused connection, DNS
    failure, timeout, aborted transfer)."""


class ServerError(HttpRequestError):
    """Raised for 5xx and 429 responses."""


class ClientError(HttpRequestError):
    """Raised for 4xx responses other than 429.

    Client errors are never retried and always carry the response.
    """


class UnexpectedStatusError(HttpRequestError):
    """Raised for statuses outside the success, client and server
    error ranges (e.g. an unfollowed 3xx)."""


class RetriesExhaustedError(HttpRequestError):
    """Raised when every allowed attempt failed with a retryable
    outcome.

    ``cause`` holds the last ``ServerError`` or ``TransportError``.
    """


class CancellationError(HttpRequestError):
    """Raised when the cancellation signal fires while waiting between
    two attempts."""


class DecodeError(SaasRestError, ValueError):
    r"""Raised when a response body cannot be decoded as JSON.

    Args:
        message: A human readable description of the failure.
        body: The raw body that failed to decode.
    """

    def __init__(self, message: str, body: bytes = b"") -> None:
        super().__init__(message)
        self.body = body
