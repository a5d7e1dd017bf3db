r"""Utilities shared across saasrest."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

from saasrest.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
