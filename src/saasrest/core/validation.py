r"""Parameter validation utilities for the client configuration.

This module provides validation functions to ensure the configuration
meets the required constraints before any request is sent.
"""

from __future__ import annotations

__all__ = ["validate_pool_params", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from saasrest.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    base_delay: float = 0.0,
    backoff_exponent: float = 0.0,
    max_delay: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. A value
            of 0 means a single attempt.
        base_delay: Delay in seconds before the first retry.
            Must be >= 0.
        backoff_exponent: Growth factor between successive delays.
            Must be >= 0.
        max_delay: Optional delay cap in seconds. Must be > 0 if
            provided.

    Raises:
        ValueError: If one of the parameters is out of range.

    Example:
        ```pycon
        >>> from saasrest.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3, base_delay=5.0, backoff_exponent=2.0)
        >>> validate_retry_params(max_retries=-1)  # doctest: +SKIP

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if base_delay < 0:
        msg = f"base_delay must be >= 0, got {base_delay}"
        raise ValueError(msg)
    if backoff_exponent < 0:
        msg = f"backoff_exponent must be >= 0, got {backoff_exponent}"
        raise ValueError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be > 0, got {max_delay}"
        raise ValueError(msg)


def validate_pool_params(max_idle_connections: int, max_connections_per_host: int) -> None:
    """Validate connection pool sizing.

    Raises:
        ValueError: If one of the values is negative.
    """
    if max_idle_connections < 0:
        msg = f"max_idle_connections must be >= 0, got {max_idle_connections}"
        raise ValueError(msg)
    if max_connections_per_host < 0:
        msg = f"max_connections_per_host must be >= 0, got {max_connections_per_host}"
        raise ValueError(msg)
