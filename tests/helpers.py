r"""Shared test helpers."""

from __future__ import annotations

__all__ = [
    "TEST_URL",
    "create_mock_transport",
    "create_response",
    "make_http_transport",
]

from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx

from saasrest.transport import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

TEST_URL = "https://api.example.com/services/data/indexes"


def create_response(
    status_code: int = 200,
    body: bytes = b"",
    headers: Mapping[str, str] | None = None,
) -> httpx.Response:
    """Create a fully read httpx.Response."""
    return httpx.Response(status_code, content=body, headers=headers)


def create_mock_transport(*results: httpx.Response | Exception) -> Mock:
    """Create a mock transport returning or raising ``results`` in
    order."""
    return Mock(send=Mock(side_effect=list(results)))


def make_http_transport(
    handler: Callable[[httpx.Request], httpx.Response],
    recorded: list[httpx.Request],
) -> HttpxTransport:
    """Create a transport backed by ``httpx.MockTransport`` that records
    every request it receives."""

    def _record(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return handler(request)

    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(_record)))
