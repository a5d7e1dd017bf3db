r"""Request body capture.

A body is serialized exactly once, before the first attempt, into an
immutable ``RequestBody``. Every attempt then sends the same bytes.
"""

from __future__ import annotations

__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "RequestBody",
    "encode_form_body",
    "encode_json_body",
]

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from saasrest.exceptions import SerializationError

if TYPE_CHECKING:
    from collections.abc import Mapping

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class RequestBody:
    """Serialized request body.

    Args:
        content: The encoded bytes sent on every attempt.
        content_type: The value of the ``Content-Type`` header.
    """

    content: bytes
    content_type: str

    def __len__(self) -> int:
        return len(self.content)


def encode_json_body(body: Any, method: str, url: str) -> RequestBody:
    r"""Serialize a JSON body.

    Args:
        body: Any JSON-serializable value.
        method: The HTTP method, used in error messages.
        url: The URL, used in error messages.

    Returns:
        The captured body.

    Raises:
        SerializationError: if ``body`` cannot be encoded as JSON.

    Example:
        ```pycon
        >>> from saasrest.core.body import encode_json_body
        >>> encode_json_body({"name": "main"}, "POST", "https://api.example.com").content
        b'{"name":"main"}'

        ```
    """
    try:
        content = json.dumps(body, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            method=method,
            url=url,
            message=f"{method} request to {url} has a body that cannot be encoded as JSON: {exc}",
            cause=exc,
        ) from exc
    return RequestBody(content=content, content_type=JSON_CONTENT_TYPE)


def encode_form_body(form_fields: Mapping[str, Any], method: str, url: str) -> RequestBody:
    r"""Serialize form fields as ``key=value&...`` pairs.

    Pairs follow the mapping iteration order.

    Args:
        form_fields: The form fields.
        method: The HTTP method, used in error messages.
        url: The URL, used in error messages.

    Returns:
        The captured body.

    Raises:
        SerializationError: if ``form_fields`` is not a mapping of
            encodable values.

    Example:
        ```pycon
        >>> from saasrest.core.body import encode_form_body
        >>> encode_form_body(
        ...     {"name": "main", "datatype": "event"}, "POST", "https://api.example.com"
        ... ).content
        b'name=main&datatype=event'

        ```
    """
    try:
        content = urlencode(list(form_fields.items())).encode("ascii")
    except (AttributeError, TypeError, UnicodeEncodeError) as exc:
        raise SerializationError(
            method=method,
            url=url,
            message=f"{method} request to {url} has form fields that cannot be encoded: {exc}",
            cause=exc,
        ) from exc
    return RequestBody(content=content, content_type=FORM_CONTENT_TYPE)
