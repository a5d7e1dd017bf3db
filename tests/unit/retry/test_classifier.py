from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from saasrest.exceptions import (
    ClientError,
    RetriesExhaustedError,
    ServerError,
    TransportError,
    UnexpectedStatusError,
)
from saasrest.response import Response
from saasrest.retry.classifier import ResponseClassifier, Verdict, classify_status
from saasrest.retry.outcome import RetryableFailure, Success, TerminalFailure
from tests.helpers import TEST_URL

#####################################
#     Tests for classify_status     #
#####################################


@pytest.mark.parametrize("status_code", [200, 201, 202, 204, 299])
def test_classify_status_success(status_code: int) -> None:
    assert classify_status(status_code, b"") is Verdict.SUCCESS


def test_classify_status_conflict_is_success() -> None:
    assert classify_status(409, b"whatever") is Verdict.SUCCESS


@pytest.mark.parametrize(
    "body", [b"already exists", b"Index 'main' already exists.", b"port already in use"]
)
def test_classify_status_server_error_with_marker_is_success(body: bytes) -> None:
    assert classify_status(500, body) is Verdict.SUCCESS


def test_classify_status_server_error_marker_case_sensitive() -> None:
    assert classify_status(500, b"ALREADY EXISTS") is Verdict.RETRYABLE


@pytest.mark.parametrize("status_code", [501, 502, 503, 504])
def test_classify_status_marker_only_applies_to_500(status_code: int) -> None:
    assert classify_status(status_code, b"already exists") is Verdict.RETRYABLE


@pytest.mark.parametrize("status_code", [429, 500, 502, 503, 504, 599])
def test_classify_status_retryable(status_code: int) -> None:
    assert classify_status(status_code, b"internal failure") is Verdict.RETRYABLE


@pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422, 499])
def test_classify_status_client_error(status_code: int) -> None:
    assert classify_status(status_code, b"") is Verdict.CLIENT_ERROR


@pytest.mark.parametrize("status_code", [100, 199, 301, 302, 304])
def test_classify_status_unexpected(status_code: int) -> None:
    assert classify_status(status_code, b"") is Verdict.UNEXPECTED


def test_classify_status_custom_markers() -> None:
    assert classify_status(500, b"duplicate entry", markers=("duplicate",)) is Verdict.SUCCESS
    assert classify_status(500, b"already exists", markers=("duplicate",)) is Verdict.RETRYABLE


def test_classify_status_no_markers() -> None:
    assert classify_status(500, b"already exists", markers=()) is Verdict.RETRYABLE


########################################
#     Tests for ResponseClassifier     #
########################################


def test_response_classifier_repr() -> None:
    assert repr(ResponseClassifier(markers=["x"])) == "ResponseClassifier(markers=('x',))"


def test_classify_response_success() -> None:
    response = Response(status_code=200, body=b"ok")
    outcome = ResponseClassifier().classify_response(
        response, attempt=0, max_retries=3, method="GET", url=TEST_URL
    )
    assert outcome == Success(response)


def test_classify_response_already_exists_logs_info() -> None:
    logger = Mock()
    response = Response(status_code=500, body=b"index already exists")
    outcome = ResponseClassifier(logger=logger).classify_response(
        response, attempt=0, max_retries=3, method="POST", url=TEST_URL
    )
    assert isinstance(outcome, Success)
    logger.info.assert_called_once()
    assert "already exists" in logger.info.call_args.args[0]


def test_classify_response_success_2xx_does_not_log_info() -> None:
    logger = Mock()
    ResponseClassifier(logger=logger).classify_response(
        Response(status_code=201), attempt=0, max_retries=3, method="POST", url=TEST_URL
    )
    logger.info.assert_not_called()


def test_classify_response_retryable_with_attempts_left() -> None:
    response = Response(status_code=503, body=b"busy")
    outcome = ResponseClassifier().classify_response(
        response, attempt=1, max_retries=3, method="GET", url=TEST_URL
    )
    assert isinstance(outcome, RetryableFailure)
    assert outcome.reason == "status 503"
    assert outcome.response is response
    assert isinstance(outcome.error, ServerError)
    assert outcome.error.status_code == 503
    assert "busy" in outcome.error.message


def test_classify_response_retryable_last_attempt() -> None:
    response = Response(status_code=429)
    outcome = ResponseClassifier().classify_response(
        response, attempt=3, max_retries=3, method="GET", url=TEST_URL
    )
    assert isinstance(outcome, TerminalFailure)
    assert outcome.response is response
    error = outcome.error
    assert isinstance(error, RetriesExhaustedError)
    assert error.message == f"GET request to {TEST_URL} failed with status 429 after 4 attempts"
    assert error.status_code == 429
    assert isinstance(error.cause, ServerError)
    assert error.__cause__ is error.cause


def test_classify_response_client_error() -> None:
    response = Response(status_code=403, body=b"forbidden")
    outcome = ResponseClassifier().classify_response(
        response, attempt=0, max_retries=3, method="DELETE", url=TEST_URL
    )
    assert isinstance(outcome, TerminalFailure)
    assert isinstance(outcome.error, ClientError)
    assert outcome.error.response is response
    assert outcome.error.message == (
        f"DELETE request to {TEST_URL} failed with client error 403: forbidden"
    )


def test_classify_response_unexpected() -> None:
    response = Response(status_code=301)
    outcome = ResponseClassifier().classify_response(
        response, attempt=0, max_retries=3, method="GET", url=TEST_URL
    )
    assert isinstance(outcome, TerminalFailure)
    assert isinstance(outcome.error, UnexpectedStatusError)
    assert outcome.error.status_code == 301


def test_classify_response_truncates_long_body() -> None:
    response = Response(status_code=400, body=b"x" * 1000)
    outcome = ResponseClassifier().classify_response(
        response, attempt=0, max_retries=3, method="GET", url=TEST_URL
    )
    assert outcome.error.message.endswith("x" * 200 + "...")


def test_classify_exception_with_attempts_left() -> None:
    exc = httpx.ConnectError("refused")
    outcome = ResponseClassifier().classify_exception(
        exc, attempt=0, max_retries=1, method="GET", url=TEST_URL
    )
    assert isinstance(outcome, RetryableFailure)
    assert outcome.reason == "ConnectError"
    assert outcome.response is None
    assert isinstance(outcome.error, TransportError)
    assert outcome.error.cause is exc
    assert outcome.error.status_code is None


def test_classify_exception_last_attempt() -> None:
    exc = httpx.ReadTimeout("timed out")
    outcome = ResponseClassifier().classify_exception(
        exc, attempt=1, max_retries=1, method="GET", url=TEST_URL
    )
    assert isinstance(outcome, TerminalFailure)
    assert outcome.response is None
    assert isinstance(outcome.error, RetriesExhaustedError)
    assert outcome.error.message == f"GET request to {TEST_URL} failed after 2 attempts: timed out"
    assert isinstance(outcome.error.cause, TransportError)
    assert outcome.error.cause.cause is exc
