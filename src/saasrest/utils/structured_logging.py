r"""Structured logging utilities for machine-readable log output.

saasrest logs through the standard ``logging`` module. This module adds
an opt-in JSON formatter, correlation ids tracking the log records of
one provisioning run, and a helper configuring a logger for
development (human readable) or production (JSON lines).

Example:
    Enable structured logging for saasrest:

    ```python
    import logging
    from saasrest.utils.structured_logging import configure_logging

    logger = configure_logging(
        level=logging.INFO, structured=True, service_name="provisioner", instance_id="a1"
    )
    ```

    Use correlation ids to track related calls:

    ```python
    from saasrest.utils.structured_logging import clear_correlation_id, set_correlation_id

    set_correlation_id("run-123")
    try:
        client.post_form("/services/data/indexes", {"name": "main"})
    finally:
        clear_correlation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Attributes set by logging.LogRecord itself, never copied as extra fields
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def get_correlation_id() -> str | None:
    """Get the correlation id of the current context.

    Example:
        ```pycon
        >>> from saasrest.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("run-42")
        >>> get_correlation_id()
        'run-42'
        >>> clear_correlation_id()
        >>> get_correlation_id()

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation id of the current context.

    The id is stored in a context variable, so each thread keeps its
    own value.
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes one JSON object with the fields ``timestamp``,
    ``level``, ``logger``, ``message``, ``module``, ``function`` and
    ``line``, plus ``correlation_id`` when set, the static fields given
    at construction, ``exception`` when the record carries one, and any
    field passed through ``extra``.

    Args:
        static_fields: Fields added to every record, e.g. the service
            name and the instance id.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from saasrest.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter({"service": "provisioner"}))
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("index created", extra={"index": "main"})
        >>> output = stream.getvalue()
        >>> '"index": "main"' in output and '"service": "provisioner"' in output
        True

        ```
    """

    def __init__(self, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(self.static_fields)

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        """Format the timestamp as ISO 8601 UTC with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def configure_logging(
    level: int | str = logging.INFO,
    *,
    structured: bool = False,
    service_name: str | None = None,
    instance_id: str | None = None,
    logger_name: str = "saasrest",
) -> logging.Logger:
    r"""Configure a logger to inject into ``RestClient``.

    Args:
        level: The log level, as an int or a name such as ``"debug"``.
        structured: ``True`` for JSON lines, ``False`` for a human
            readable development format.
        service_name: Optional service name added to every JSON record.
        instance_id: Optional instance id added to every JSON record.
        logger_name: The name of the configured logger.

    Returns:
        The configured logger. Calling this function again replaces the
        handler it installed previously.

    Example:
        ```pycon
        >>> import logging
        >>> from saasrest.utils.structured_logging import configure_logging
        >>> logger = configure_logging("debug", logger_name="doctest_configure")
        >>> logger.level == logging.DEBUG
        True

        ```
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            msg = f"unknown log level: {name}"
            raise ValueError(msg)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_saasrest_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._saasrest_handler = True  # type: ignore[attr-defined]
    if structured:
        static_fields = {}
        if service_name is not None:
            static_fields["service"] = service_name
        if instance_id is not None:
            static_fields["instance_id"] = instance_id
        handler.setFormatter(StructuredFormatter(static_fields))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
    logger.addHandler(handler)
    return logger


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    The fields appear in the JSON output of ``StructuredFormatter``.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional structured fields.
    """
    logger.log(level, message, extra=extra)
