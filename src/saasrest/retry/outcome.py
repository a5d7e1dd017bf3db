r"""Outcome of one attempt.

An attempt ends in exactly one of three states: the call succeeded, it
failed in a way that allows another attempt, or it failed for good.
"""

from __future__ import annotations

__all__ = ["Outcome", "RetryableFailure", "Success", "TerminalFailure"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from saasrest.exceptions import HttpRequestError
    from saasrest.response import Response


@dataclass(frozen=True)
class Success:
    """The attempt produced the final response."""

    response: Response


@dataclass(frozen=True)
class RetryableFailure:
    """The attempt failed and another attempt is allowed.

    Attributes:
        reason: Short description used in log messages.
        error: The error describing the failure.
        response: The received response, or ``None`` for a transport
            failure.
    """

    reason: str
    error: HttpRequestError
    response: Response | None = None


@dataclass(frozen=True)
class TerminalFailure:
    """The attempt failed and the call must stop.

    Attributes:
        error: The error raised to the caller.
        response: The received response, if any.
    """

    error: HttpRequestError
    response: Response | None = None


Outcome = Success | RetryableFailure | TerminalFailure
