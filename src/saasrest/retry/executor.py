r"""Request executor running the attempt loop of one logical call.

Each attempt rebuilds its request from the captured body bytes and the
merged headers, sends it through the transport, and hands the result to
the ``ResponseClassifier``. The loop stops on the first ``Success`` or
``TerminalFailure`` outcome, and waits between attempts according to
the ``RetryPolicy``.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from saasrest.core.config import DEFAULT_TIMEOUT, RetryPolicy
from saasrest.exceptions import CancellationError, RetriesExhaustedError
from saasrest.response import Response
from saasrest.retry.classifier import ResponseClassifier
from saasrest.retry.manager import CallbackManager
from saasrest.retry.outcome import RetryableFailure, Success, TerminalFailure
from saasrest.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping

    from saasrest.cancellation import CancellationToken
    from saasrest.core.body import RequestBody
    from saasrest.core.config import ClientConfig
    from saasrest.retry.outcome import Outcome
    from saasrest.transport import Transport


class RequestExecutor:
    r"""Run the attempt loop of a logical call.

    The executor holds no per-call state, so one instance can serve
    concurrent calls from several threads.

    Args:
        transport: The transport sending each attempt.
        retry_policy: The retry budget and delay computation. Defaults
            to ``RetryPolicy()``.
        timeout: Timeout in seconds of one attempt.
        default_headers: Headers sent with every request.
        classifier: The classifier of attempts. Defaults to
            ``ResponseClassifier()``.
        callbacks: Optional lifecycle callbacks.
        logger: Optional logger receiving the diagnostic messages.

    Example:
        ```pycon
        >>> import httpx
        >>> from saasrest.core.config import RetryPolicy
        >>> from saasrest.retry.executor import RequestExecutor
        >>> from saasrest.transport import HttpxTransport
        >>> executor = RequestExecutor(
        ...     transport=HttpxTransport(client=httpx.Client()),
        ...     retry_policy=RetryPolicy(max_retries=2, base_delay=1.0),
        ... )  # doctest: +SKIP
        >>> response = executor.execute("GET", "https://api.example.com/indexes")  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        transport: Transport,
        retry_policy: RetryPolicy | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Mapping[str, str] | None = None,
        classifier: ResponseClassifier | None = None,
        callbacks: CallbackManager | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transport = transport
        self._retry_policy = retry_policy or RetryPolicy()
        self._timeout = timeout
        self._default_headers = httpx.Headers()
        _set_headers(self._default_headers, default_headers)
        self._logger = logger or logging.getLogger(__name__)
        self._classifier = classifier or ResponseClassifier(logger=self._logger)
        self._callbacks = callbacks or CallbackManager()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Transport,
        logger: logging.Logger | None = None,
    ) -> RequestExecutor:
        """Create an executor from a client configuration."""
        return cls(
            transport=transport,
            retry_policy=config.retry_policy,
            timeout=config.timeout,
            default_headers=config.headers,
            classifier=ResponseClassifier(markers=config.idempotency_markers, logger=logger),
            callbacks=CallbackManager(
                on_request=config.on_request,
                on_retry=config.on_retry,
                on_success=config.on_success,
                on_failure=config.on_failure,
            ),
            logger=logger,
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def build_headers(
        self, headers: Mapping[str, str] | None = None, body: RequestBody | None = None
    ) -> httpx.Headers:
        """Merge the default headers with the per-call headers.

        Per-call headers override the defaults regardless of the name
        case. ``Content-Type`` and ``Content-Length`` are set only when
        a body is sent.

        Args:
            headers: The per-call headers.
            body: The captured body, if any.

        Returns:
            A new header collection for one attempt.
        """
        merged = httpx.Headers(self._default_headers)
        _set_headers(merged, headers)
        if body is not None:
            merged["Content-Type"] = body.content_type
            merged["Content-Length"] = str(len(body))
        return merged

    def execute(
        self,
        method: str,
        url: str,
        body: RequestBody | None = None,
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> Response:
        """Run the attempt loop until success, terminal failure, or
        cancellation.

        Args:
            method: The HTTP method.
            url: The absolute URL.
            body: The body captured before the loop, sent unchanged on
                every attempt.
            headers: The per-call headers.
            cancel: Optional signal interrupting the waits between
                attempts.

        Returns:
            The response of the successful attempt.

        Raises:
            ClientError: on a 4xx response other than 429.
            UnexpectedStatusError: on a status outside the handled
                ranges.
            RetriesExhaustedError: when the last allowed attempt failed
                with a retryable outcome.
            CancellationError: when ``cancel`` fires before an attempt.
        """
        max_retries = self._retry_policy.max_retries
        start_time = time.monotonic()
        last_failure: RetryableFailure | None = None

        for attempt in range(max_retries + 1):
            if attempt > 0:
                self._wait_before_retry(method, url, attempt, last_failure, cancel, start_time)
            elif cancel is not None and cancel.is_cancelled:
                self._raise_cancelled(method, url, attempt, None, cancel, start_time)

            self._callbacks.on_request(
                url=url, method=method, attempt=attempt, max_retries=max_retries
            )
            outcome = self.run_attempt(
                method, url, attempt, body=body, headers=headers, start_time=start_time
            )

            if isinstance(outcome, Success):
                self._callbacks.on_success(
                    url=url,
                    method=method,
                    attempt=attempt,
                    max_retries=max_retries,
                    response=outcome.response,
                    start_time=start_time,
                )
                return outcome.response

            if isinstance(outcome, TerminalFailure):
                self._logger.debug(f"{method} request to {url} stopped: {outcome.error.message}")
                self._callbacks.on_failure(
                    url=url,
                    method=method,
                    attempt=attempt,
                    max_retries=max_retries,
                    error=outcome.error,
                    status_code=outcome.error.status_code,
                    start_time=start_time,
                )
                raise outcome.error

            last_failure = outcome

        # Only reachable with an empty loop
        error = RetriesExhaustedError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed: retries exhausted ({max_retries})",
            response=last_failure.response if last_failure is not None else None,
            cause=last_failure.error if last_failure is not None else None,
        )
        self._callbacks.on_failure(
            url=url,
            method=method,
            attempt=max_retries,
            max_retries=max_retries,
            error=error,
            status_code=None,
            start_time=start_time,
        )
        raise error

    def run_attempt(
        self,
        method: str,
        url: str,
        attempt: int,
        *,
        body: RequestBody | None = None,
        headers: Mapping[str, str] | None = None,
        start_time: float | None = None,
    ) -> Outcome:
        """Send one attempt and classify its result.

        Args:
            method: The HTTP method.
            url: The absolute URL.
            attempt: Current attempt number (0-indexed).
            body: The captured body, if any.
            headers: The per-call headers.
            start_time: ``time.monotonic()`` value when the call
                started. Defaults to now.

        Returns:
            The outcome of the attempt.
        """
        if start_time is None:
            start_time = time.monotonic()
        max_retries = self._retry_policy.max_retries
        request_headers = self.build_headers(headers, body)
        try:
            raw = self._transport.send(
                method,
                url,
                headers=request_headers,
                content=body.content if body is not None else None,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            self._logger.debug(
                f"{method} request to {url} encountered {type(exc).__name__} on attempt "
                f"{attempt + 1}/{max_retries + 1}: {exc}"
            )
            return self._classifier.classify_exception(
                exc, attempt=attempt, max_retries=max_retries, method=method, url=url
            )

        response = Response.from_httpx(raw, elapsed=time.monotonic() - start_time)
        self._logger.debug(
            f"{method} request to {url} returned {response.status_code} on attempt "
            f"{attempt + 1}/{max_retries + 1}"
        )
        return self._classifier.classify_response(
            response, attempt=attempt, max_retries=max_retries, method=method, url=url
        )

    def _wait_before_retry(
        self,
        method: str,
        url: str,
        attempt: int,
        last_failure: RetryableFailure | None,
        cancel: CancellationToken | None,
        start_time: float,
    ) -> None:
        max_retries = self._retry_policy.max_retries
        delay = self._retry_policy.delay(attempt)
        reason = last_failure.reason if last_failure is not None else "unknown"
        log_structured(
            self._logger,
            logging.WARNING,
            f"Retrying {method} request to {url} ({attempt + 1}/{max_retries + 1}) "
            f"in {delay:.2f}s after {reason}",
            method=method,
            url=url,
            attempt=attempt + 1,
            delay=delay,
        )
        self._callbacks.on_retry(
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            sleep_time=delay,
            error=last_failure.error if last_failure is not None else None,
            status_code=last_failure.error.status_code if last_failure is not None else None,
        )
        if cancel is None:
            time.sleep(delay)
        elif cancel.wait(delay):
            self._raise_cancelled(method, url, attempt, last_failure, cancel, start_time)

    def _raise_cancelled(
        self,
        method: str,
        url: str,
        attempt: int,
        last_failure: RetryableFailure | None,
        cancel: CancellationToken,
        start_time: float,
    ) -> None:
        error = CancellationError(
            method=method,
            url=url,
            message=(
                f"{method} request to {url} cancelled before attempt {attempt + 1}: "
                f"{cancel.reason or 'deadline exceeded'}"
            ),
            status_code=last_failure.error.status_code if last_failure is not None else None,
            response=last_failure.response if last_failure is not None else None,
            cause=last_failure.error if last_failure is not None else None,
        )
        self._logger.debug(error.message)
        self._callbacks.on_failure(
            url=url,
            method=method,
            attempt=max(attempt - 1, 0),
            max_retries=self._retry_policy.max_retries,
            error=error,
            status_code=error.status_code,
            start_time=start_time,
        )
        raise error


def _set_headers(target: httpx.Headers, headers: Mapping[str, str] | None) -> None:
    # Names differing only by case collapse to one entry, last value wins
    for name, value in (headers or {}).items():
        target[name] = value
