r"""Configuration dataclasses and defaults for the REST client.

This module provides the configuration constants and the immutable
configuration objects shared by ``RestClient`` and ``RequestExecutor``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_EXPONENT",
    "DEFAULT_IDEMPOTENCY_MARKERS",
    "DEFAULT_MAX_CONNECTIONS_PER_HOST",
    "DEFAULT_MAX_IDLE_CONNECTIONS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "RetryPolicy",
]

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from saasrest.backoff import ExponentialBackoff
from saasrest.core.validation import (
    validate_pool_params,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from saasrest.backoff import BaseBackoffStrategy
    from saasrest.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo


# Default timeout in seconds for one attempt
# Provisioning endpoints are slow, so this is generous
DEFAULT_TIMEOUT = 30.0

# Default maximum number of retries
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Default delay in seconds before the first retry
DEFAULT_RETRY_DELAY = 5.0

# Default growth factor between two successive retry delays
# Wait time = retry_delay * backoff_exponent ** (retry - 1)
# With the defaults: 5s, 10s, 20s
DEFAULT_BACKOFF_EXPONENT = 2.0

# Default connection pool sizing
DEFAULT_MAX_IDLE_CONNECTIONS = 100
DEFAULT_MAX_CONNECTIONS_PER_HOST = 100

# Body fragments of a 500 response meaning the resource is already
# provisioned
DEFAULT_IDEMPOTENCY_MARKERS = ("already in use", "already exists")


@dataclass(frozen=True)
class RetryPolicy:
    r"""Retry budget and delay computation.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. The total
            number of attempts is ``max_retries + 1``.
        base_delay: Delay in seconds before the first retry.
        backoff_exponent: Growth factor between successive delays.
        max_delay: Optional cap in seconds applied to every delay.
        backoff_strategy: Optional strategy replacing the exponential
            computation built from the fields above.

    Example:
        ```pycon
        >>> from saasrest.core.config import RetryPolicy
        >>> policy = RetryPolicy(max_retries=2, base_delay=5.0, backoff_exponent=2.0)
        >>> [policy.delay(attempt) for attempt in (1, 2)]
        [5.0, 10.0]

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_RETRY_DELAY
    backoff_exponent: float = DEFAULT_BACKOFF_EXPONENT
    max_delay: float | None = None
    backoff_strategy: BaseBackoffStrategy | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            backoff_exponent=self.backoff_exponent,
            max_delay=self.max_delay,
        )

    @property
    def strategy(self) -> BaseBackoffStrategy:
        """The backoff strategy used to compute the delays."""
        if self.backoff_strategy is not None:
            return self.backoff_strategy
        return ExponentialBackoff(
            base_delay=self.base_delay,
            exponent=self.backoff_exponent,
            max_delay=self.max_delay,
        )

    @property
    def max_attempts(self) -> int:
        """The total number of attempts, initial attempt included."""
        return self.max_retries + 1

    def delay(self, attempt: int) -> float:
        """Compute the delay before a retry.

        Args:
            attempt: The retry number (1-indexed).

        Returns:
            The delay in seconds.
        """
        return self.strategy.calculate(attempt)

    def with_defaults(self) -> RetryPolicy:
        """Return a copy where zero-valued fields take their default
        value."""
        return replace(
            self,
            max_retries=self.max_retries or DEFAULT_MAX_RETRIES,
            base_delay=self.base_delay or DEFAULT_RETRY_DELAY,
            backoff_exponent=self.backoff_exponent or DEFAULT_BACKOFF_EXPONENT,
        )


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration of a ``RestClient``.

    Zero-valued fields are replaced by their default at construction
    time: ``timeout`` by 30s, ``max_retries`` by 3, the retry delay by
    5s, the backoff exponent by 2.0 and both pool sizes by 100. Build a
    ``RetryPolicy`` and hand it to ``RequestExecutor`` directly to run
    with zero retries.

    Args:
        base_url: Prefix joined with every request path.
        headers: Headers sent with every request. Per-call headers
            override them, ignoring the name case.
        timeout: Timeout in seconds of one attempt. Must be > 0.
        retry_policy: Retry budget and delay computation.
        max_idle_connections: Maximum number of idle connections kept
            in the pool.
        max_connections_per_host: Maximum number of connections opened
            by the pool.
        verify_ssl: Whether TLS certificates are verified.
        idempotency_markers: Body fragments of a 500 response meaning
            the resource is already provisioned.
        on_request: Optional callback called before each attempt.
        on_retry: Optional callback called before each retry wait.
        on_success: Optional callback called when a call succeeds.
        on_failure: Optional callback called when a call fails.

    Example:
        ```pycon
        >>> from saasrest.core.config import ClientConfig
        >>> config = ClientConfig(base_url="https://api.example.com", timeout=0)
        >>> config.timeout
        30.0
        >>> config.retry_policy.max_retries
        3
        >>> merged = config.merge(timeout=10.0)
        >>> merged.timeout
        10.0
        >>> config.timeout  # Original unchanged
        30.0

        ```
    """

    base_url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    max_idle_connections: int = DEFAULT_MAX_IDLE_CONNECTIONS
    max_connections_per_host: int = DEFAULT_MAX_CONNECTIONS_PER_HOST
    verify_ssl: bool = True
    idempotency_markers: tuple[str, ...] = DEFAULT_IDEMPOTENCY_MARKERS
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        """Apply the defaults and validate the configuration.

        Raises:
            ValueError: If any parameter fails validation.
        """
        object.__setattr__(self, "timeout", self.timeout or DEFAULT_TIMEOUT)
        object.__setattr__(
            self, "max_idle_connections", self.max_idle_connections or DEFAULT_MAX_IDLE_CONNECTIONS
        )
        object.__setattr__(
            self,
            "max_connections_per_host",
            self.max_connections_per_host or DEFAULT_MAX_CONNECTIONS_PER_HOST,
        )
        object.__setattr__(self, "retry_policy", self.retry_policy.with_defaults())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))
        object.__setattr__(self, "idempotency_markers", tuple(self.idempotency_markers))

        validate_timeout(self.timeout)
        validate_pool_params(
            max_idle_connections=self.max_idle_connections,
            max_connections_per_host=self.max_connections_per_host,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from saasrest.core.config import ClientConfig
            >>> config = ClientConfig(base_url="https://api.example.com")
            >>> config.merge(verify_ssl=False).verify_ssl
            False

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a dictionary.

        Returns:
            Dictionary with the configuration parameters.
        """
        return {
            "base_url": self.base_url,
            "headers": dict(self.headers),
            "timeout": self.timeout,
            "max_retries": self.retry_policy.max_retries,
            "retry_delay": self.retry_policy.base_delay,
            "backoff_exponent": self.retry_policy.backoff_exponent,
            "max_idle_connections": self.max_idle_connections,
            "max_connections_per_host": self.max_connections_per_host,
            "verify_ssl": self.verify_ssl,
            "idempotency_markers": self.idempotency_markers,
        }
