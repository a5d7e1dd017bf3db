r"""Synchronous client for configuring resources through REST
endpoints.

The ``RestClient`` joins request paths to a base URL, captures the body
once, and delegates each logical call to a ``RequestExecutor`` that
retries transient failures and treats "already exists" answers as
success.
"""

from __future__ import annotations

__all__ = ["RestClient"]

from typing import TYPE_CHECKING, Any

from saasrest.core.body import encode_form_body, encode_json_body
from saasrest.core.config import ClientConfig
from saasrest.retry.executor import RequestExecutor
from saasrest.transport import HttpxTransport

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from saasrest.cancellation import CancellationToken
    from saasrest.core.body import RequestBody
    from saasrest.response import Response
    from saasrest.transport import Transport


class RestClient:
    r"""Client issuing resilient calls against one REST API.

    The configuration is immutable, so one client can be shared by
    several threads. Each call runs its attempt loop on the calling
    thread.

    Two usage patterns are supported, mirroring who owns the transport:

    **Client-managed transport**: without a ``transport`` argument, the
    client builds an ``HttpxTransport`` from the configuration (timeout,
    TLS verification, pool sizing) and closes it in ``close()`` or when
    the ``with`` block exits.

    .. code-block:: python

        from saasrest import ClientConfig, RestClient

        config = ClientConfig(
            base_url="https://splunk.example.com:8089",
            headers={"Authorization": "Bearer token"},
        )
        with RestClient(config) as client:
            client.post_form("/services/data/indexes", {"name": "salesforce"})

    **Caller-managed transport**: a transport passed in is used as-is and
    is never closed by the client.

    .. code-block:: python

        import httpx
        from saasrest import ClientConfig, RestClient
        from saasrest.transport import HttpxTransport

        with httpx.Client(verify=False) as http_client:
            client = RestClient(ClientConfig(), transport=HttpxTransport(client=http_client))
            client.get("https://api.example.com/indexes")

    Args:
        config: The client configuration. Defaults to ``ClientConfig()``.
        transport: Optional transport. Defaults to an ``HttpxTransport``
            owned by the client.
        logger: Optional logger receiving the diagnostic messages.

    Example:
        ```pycon
        >>> from saasrest import ClientConfig, RestClient
        >>> with RestClient(ClientConfig(base_url="https://api.example.com")) as client:  # doctest: +SKIP
        ...     response = client.get("/indexes")
        ...     indexes = response.as_json()
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        self._close_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(self._config)
        self._executor = RequestExecutor.from_config(
            self._config, transport=self._transport, logger=logger
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_url={self._config.base_url!r})"

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
    def config(self) -> ClientConfig:
        return self._config

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def close(self) -> None:
        """Close the transport if the client created it."""
        if self._close_transport:
            self._transport.close()
            self._close_transport = False

    def url_for(self, path: str) -> str:
        r"""Join a request path to the base URL.

        Absolute URLs are returned unchanged.

        Example:
            ```pycon
            >>> from saasrest import ClientConfig, RestClient
            >>> from unittest.mock import Mock
            >>> client = RestClient(
            ...     ClientConfig(base_url="https://api.example.com/"), transport=Mock()
            ... )
            >>> client.url_for("/services/indexes")
            'https://api.example.com/services/indexes'

            ```
        """
        base_url = self._config.base_url
        if not base_url or path.startswith(("http://", "https://")):
            return path
        if not path:
            return base_url
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        body: RequestBody | None = None,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        r"""Send a request with automatic retry logic.

        Args:
            method: The HTTP method.
            path: The path joined to the base URL.
            body: An already captured body, if any.
            headers: Per-call headers overriding the default headers.
            cancel: Optional signal interrupting the waits between
                attempts.

        Returns:
            The response of the successful attempt.

        Raises:
            HttpRequestError: If the call fails. The last response is
                attached when one was received.
        """
        return self._executor.execute(
            method.upper(), self.url_for(path), body=body, headers=headers, cancel=cancel
        )

    def get(
        self,
        path: str,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        """Send a GET request with automatic retry logic."""
        return self.request("GET", path, headers=headers, cancel=cancel)

    def post(
        self,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        r"""Send a POST request with a JSON body.

        Args:
            path: The path joined to the base URL.
            body: A JSON-serializable value. ``None`` sends no body.
            headers: Per-call headers.
            cancel: Optional cancellation signal.

        Returns:
            The response of the successful attempt.

        Raises:
            SerializationError: If ``body`` cannot be encoded as JSON.
                No request is sent.
        """
        return self._send_json("POST", path, body, headers, cancel)

    def post_form(
        self,
        path: str,
        form_fields: Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        r"""Send a POST request with a form-encoded body.

        Args:
            path: The path joined to the base URL.
            form_fields: The form fields, encoded in iteration order.
            headers: Per-call headers.
            cancel: Optional cancellation signal.

        Returns:
            The response of the successful attempt.

        Example:
            ```pycon
            >>> from saasrest import ClientConfig, RestClient
            >>> with RestClient(ClientConfig(base_url="https://splunk.example.com:8089")) as client:  # doctest: +SKIP
            ...     client.post_form("/services/data/indexes", {"name": "salesforce"})
            ...

            ```
        """
        url = self.url_for(path)
        body = encode_form_body(form_fields, method="POST", url=url)
        return self._executor.execute("POST", url, body=body, headers=headers, cancel=cancel)

    def put(
        self,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        """Send a PUT request with a JSON body."""
        return self._send_json("PUT", path, body, headers, cancel)

    def delete(
        self,
        path: str,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        """Send a DELETE request with automatic retry logic."""
        return self.request("DELETE", path, headers=headers, cancel=cancel)

    def _send_json(
        self,
        method: str,
        path: str,
        body: Any,
        headers: Mapping[str, str] | None,
        cancel: CancellationToken | None,
    ) -> Response:
        url = self.url_for(path)
        captured = encode_json_body(body, method=method, url=url) if body is not None else None
        return self._executor.execute(method, url, body=captured, headers=headers, cancel=cancel)
