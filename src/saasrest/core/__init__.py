r"""Configuration, validation and body capture shared by the client and
the executor."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_EXPONENT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "RequestBody",
    "RetryPolicy",
    "encode_form_body",
    "encode_json_body",
    "load_config",
    "validate_pool_params",
    "validate_retry_params",
    "validate_timeout",
]

from saasrest.core.body import RequestBody, encode_form_body, encode_json_body
from saasrest.core.config import (
    DEFAULT_BACKOFF_EXPONENT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    ClientConfig,
    RetryPolicy,
)
from saasrest.core.env import load_config
from saasrest.core.validation import (
    validate_pool_params,
    validate_retry_params,
    validate_timeout,
)
