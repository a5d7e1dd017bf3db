r"""Attempt loop of a logical call.

Public API:
    - Outcome variants: Success, RetryableFailure, TerminalFailure
    - ResponseClassifier / classify_status: attempt classification
    - CallbackManager: lifecycle callback dispatch
    - RequestExecutor: the attempt loop
"""

from __future__ import annotations

__all__ = [
    "CallbackManager",
    "RequestExecutor",
    "ResponseClassifier",
    "RetryableFailure",
    "Success",
    "TerminalFailure",
    "Verdict",
    "classify_status",
]

from saasrest.retry.classifier import ResponseClassifier, Verdict, classify_status
from saasrest.retry.executor import RequestExecutor
from saasrest.retry.manager import CallbackManager
from saasrest.retry.outcome import RetryableFailure, Success, TerminalFailure
