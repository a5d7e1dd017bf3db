r"""Backoff strategies computing the wait before a retry.

This package provides the strategies used by ``RetryPolicy`` to space
out successive attempts.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
]

from saasrest.backoff.base import BaseBackoffStrategy
from saasrest.backoff.constant import ConstantBackoff
from saasrest.backoff.exponential import ExponentialBackoff
