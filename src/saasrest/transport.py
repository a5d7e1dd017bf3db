r"""Transport layer sending one attempt over the network.

The executor only relies on the ``Transport`` protocol. Connection
pooling, TLS and proxies are owned by the transport, which wraps an
``httpx.Client`` by default.
"""

from __future__ import annotations

__all__ = ["HttpxTransport", "Transport"]

import logging
from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from saasrest.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Send one HTTP request and return the fully read response.

    Implementations raise ``httpx.RequestError`` (or a subclass) for
    connection level failures.
    """

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: httpx.Headers,
        content: bytes | None,
        timeout: float,
    ) -> httpx.Response: ...

    def close(self) -> None: ...


class HttpxTransport:
    r"""Transport backed by an ``httpx.Client``.

    Args:
        config: The client configuration providing the timeout, the TLS
            verification toggle and the pool sizing. Ignored when
            ``client`` is given.
        client: Optional pre-configured ``httpx.Client``. A client
            passed here is not closed by ``close()``.

    Example:
        ```pycon
        >>> from saasrest.core.config import ClientConfig
        >>> from saasrest.transport import HttpxTransport
        >>> with HttpxTransport(ClientConfig(timeout=5.0)) as transport:  # doctest: +SKIP
        ...     response = transport.send(
        ...         "GET", "https://api.example.com", headers={}, content=None, timeout=5.0
        ...     )
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        if client is not None:
            self._client = client
            self._owns_client = False
            return
        if config is None:
            msg = "either config or client must be provided"
            raise ValueError(msg)
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            limits=httpx.Limits(
                max_connections=config.max_connections_per_host,
                max_keepalive_connections=config.max_idle_connections,
            ),
        )
        self._owns_client = True
        if not config.verify_ssl:
            logger.warning("TLS certificate verification is disabled")

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def client(self) -> httpx.Client:
        return self._client

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: httpx.Headers,
        content: bytes | None,
        timeout: float,
    ) -> httpx.Response:
        """Send one request and read the whole response body.

        Raises:
            httpx.RequestError: for connection level failures.
        """
        return self._client.request(
            method, url, headers=headers, content=content, timeout=timeout
        )

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client and not self._client.is_closed:
            self._client.close()
