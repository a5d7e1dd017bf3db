r"""saasrest - Resilient REST client for configuring SaaS resources.

This package issues HTTP calls against slow REST endpoints that
occasionally fail with transient 5xx/429 errors and report "already
exists" inconsistently. Built on top of httpx, it retries transient
failures with exponential backoff, replays the same body on every
attempt, and treats "resource already provisioned" answers as success
so provisioning can be re-run safely.

Key Features:
    - Automatic retries for 5xx, 429 and connection failures
    - Exponential backoff: retry_delay * backoff_exponent ** (retry - 1)
    - 409 and "already exists" 500 responses treated as success
    - Interruptible waits through a cancellation/deadline token
    - Immutable, thread-safe client configuration
    - Callbacks and structured logging for observability

Example:
    ```pycon
    >>> from saasrest import ClientConfig, RestClient
    >>> config = ClientConfig(
    ...     base_url="https://splunk.example.com:8089",
    ...     headers={"Authorization": "Bearer token"},
    ... )
    >>> with RestClient(config) as client:  # doctest: +SKIP
    ...     client.post_form("/services/data/indexes", {"name": "salesforce"})
    ...     client.post("/servicesNS/nobody/app/inputs", {"name": "accounts"})
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "CancellationError",
    "CancellationToken",
    "ClientConfig",
    "ClientError",
    "DecodeError",
    "HttpRequestError",
    "Response",
    "RestClient",
    "RetriesExhaustedError",
    "RetryPolicy",
    "SaasRestError",
    "SerializationError",
    "ServerError",
    "TransportError",
    "UnexpectedStatusError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from saasrest.cancellation import CancellationToken
from saasrest.client import RestClient
from saasrest.core.config import ClientConfig, RetryPolicy
from saasrest.exceptions import (
    CancellationError,
    ClientError,
    DecodeError,
    HttpRequestError,
    RetriesExhaustedError,
    SaasRestError,
    SerializationError,
    ServerError,
    TransportError,
    UnexpectedStatusError,
)
from saasrest.response import Response

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
