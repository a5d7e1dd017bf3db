r"""Build a ``ClientConfig`` from environment variables.

Recognized variables, all prefixed with ``prefix``:

====================  ======================================
Variable              ClientConfig field
====================  ======================================
``URL``               ``base_url``
``REQUEST_TIMEOUT``   ``timeout`` (seconds)
``MAX_RETRIES``       ``retry_policy.max_retries``
``RETRY_DELAY``       ``retry_policy.base_delay`` (seconds)
``BACKOFF_EXPONENT``  ``retry_policy.backoff_exponent``
``SKIP_SSL_VERIFY``   ``not verify_ssl``
====================  ======================================

Missing or empty variables fall back to the ``ClientConfig`` defaults.
"""

from __future__ import annotations

__all__ = ["load_config", "parse_bool"]

import os
from typing import TYPE_CHECKING, Any

from saasrest.core.config import ClientConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})


def parse_bool(value: str) -> bool:
    r"""Parse a boolean environment value.

    Raises:
        ValueError: If the value is not a recognized boolean.

    Example:
        ```pycon
        >>> from saasrest.core.env import parse_bool
        >>> parse_bool("True"), parse_bool("0")
        (True, False)

        ```
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    msg = f"invalid boolean value: {value!r}"
    raise ValueError(msg)


def _read(
    environ: Mapping[str, str], name: str, parser: Callable[[str], Any], default: Any
) -> Any:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return parser(raw)
    except ValueError as exc:
        msg = f"invalid value for {name}: {raw!r}"
        raise ValueError(msg) from exc


def load_config(
    prefix: str = "SAASREST_",
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ClientConfig:
    r"""Load a ``ClientConfig`` from environment variables.

    Args:
        prefix: Prefix of the variable names, e.g. ``"SPLUNK_"``.
        environ: The variables to read. Defaults to ``os.environ``.
        **overrides: ``ClientConfig`` fields set explicitly, taking
            precedence over the environment.

    Returns:
        The configuration.

    Raises:
        ValueError: If a variable cannot be parsed or the resulting
            configuration is invalid.

    Example:
        ```pycon
        >>> from saasrest.core.env import load_config
        >>> config = load_config(
        ...     "SPLUNK_",
        ...     {"SPLUNK_URL": "https://splunk.example.com:8089", "SPLUNK_MAX_RETRIES": "5"},
        ... )
        >>> config.base_url, config.retry_policy.max_retries
        ('https://splunk.example.com:8089', 5)

        ```
    """
    if environ is None:
        environ = os.environ

    retry_policy = RetryPolicy(
        max_retries=_read(environ, f"{prefix}MAX_RETRIES", int, 0),
        base_delay=_read(environ, f"{prefix}RETRY_DELAY", float, 0.0),
        backoff_exponent=_read(environ, f"{prefix}BACKOFF_EXPONENT", float, 0.0),
    )
    values: dict[str, Any] = {
        "base_url": environ.get(f"{prefix}URL", "").strip(),
        "timeout": _read(environ, f"{prefix}REQUEST_TIMEOUT", float, 0.0),
        "retry_policy": retry_policy,
        "verify_ssl": not _read(environ, f"{prefix}SKIP_SSL_VERIFY", parse_bool, False),
    }
    values.update(overrides)
    return ClientConfig(**values)
