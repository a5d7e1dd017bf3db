r"""Immutable response model returned by every completed attempt."""

from __future__ import annotations

__all__ = ["Response"]

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from saasrest.exceptions import DecodeError

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx


@dataclass(frozen=True)
class Response:
    r"""Completed HTTP response.

    Header names are stored lower-cased and map to the ordered tuple of
    values received for that name.

    Args:
        status_code: The HTTP status code.
        headers: The response headers.
        body: The raw response body.
        elapsed: Seconds elapsed since the logical call started,
            including every previous attempt and wait.

    Example:
        ```pycon
        >>> from saasrest.response import Response
        >>> response = Response(status_code=201, body=b'{"name": "main"}')
        >>> response.is_success()
        True
        >>> response.as_json()
        {'name': 'main'}

        ```
    """

    status_code: int
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    body: bytes = b""
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        normalized = {}
        for name, values in self.headers.items():
            if isinstance(values, str):
                values = (values,)
            normalized.setdefault(name.lower(), ())
            normalized[name.lower()] += tuple(values)
        object.__setattr__(self, "headers", MappingProxyType(normalized))

    def __hash__(self) -> int:
        return hash(
            (self.status_code, tuple(sorted(self.headers.items())), self.body, self.elapsed)
        )

    @classmethod
    def from_httpx(cls, response: httpx.Response, elapsed: float) -> Response:
        """Build a response from a fully read ``httpx.Response``.

        Args:
            response: The transport response.
            elapsed: Seconds elapsed since the logical call started.

        Returns:
            The immutable response.
        """
        headers = {name: tuple(response.headers.get_list(name)) for name in response.headers}
        return cls(
            status_code=response.status_code,
            headers=headers,
            body=response.content,
            elapsed=elapsed,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of a header, ignoring the name case."""
        values = self.headers.get(name.lower())
        if not values:
            return default
        return values[0]

    def is_success(self) -> bool:
        """Indicate if the status code is in the 2xx range."""
        return 200 <= self.status_code < 300

    def is_client_error(self) -> bool:
        """Indicate if the status code is in the 4xx range."""
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        """Indicate if the status code is 500 or above."""
        return self.status_code >= 500

    def as_json(self) -> Any:
        """Decode the body as JSON.

        Returns:
            The decoded JSON value.

        Raises:
            DecodeError: if the body is not valid UTF-8 encoded JSON.
        """
        try:
            return json.loads(self.body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"response body is not valid JSON: {exc}"
            raise DecodeError(msg, body=self.body) from exc

    def as_text(self) -> str:
        """Return the body decoded as UTF-8 text.

        Undecodable bytes are replaced, so this never fails.
        """
        return self.body.decode("utf-8", errors="replace")
