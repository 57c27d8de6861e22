"""Structured logging with JSON-lines output.

Package modules obtain loggers through :func:`get_logger`, which wraps the
stdlib logger of the same name with structlog. Events therefore honour the
host application's stdlib logging configuration and stay silent by default.
:func:`setup_logging` attaches a JSON-lines handler to the ``array_model``
logger; the CLI calls it.
"""

from __future__ import annotations

import json
import logging
import math
import sys
import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import IO, Any, Final

import structlog

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_DEFAULT_LOGGER_NAME: Final[str] = "array_model"

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
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
        "thread",
        "threadName",
        "taskName",
    }
)

_ACTIVE_LOCK = threading.Lock()
_ACTIVE_HANDLER: logging.Handler | None = None


def get_logger(name: str) -> Any:
    """Return a structlog logger backed by the stdlib logger ``name``."""

    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class JsonLineFormatter(logging.Formatter):
    """Formatter that emits one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def setup_logging(
    level: int | str = "WARNING",
    *,
    stream: IO[str] | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Attach a JSON-lines handler to ``logger_name`` and return the logger.

    Calling it again replaces the handler installed by the previous call.
    """

    parsed_level = _parse_log_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(parsed_level)
    handler.setFormatter(JsonLineFormatter())

    logger = logging.getLogger(logger_name)
    with _ACTIVE_LOCK:
        global _ACTIVE_HANDLER
        if _ACTIVE_HANDLER is not None:
            _detach(_ACTIVE_HANDLER)
        logger.addHandler(handler)
        logger.setLevel(parsed_level)
        logger.propagate = False
        _ACTIVE_HANDLER = handler
    return logger


def shutdown_logging(logger_name: str = _DEFAULT_LOGGER_NAME) -> None:
    """Remove the handler installed by :func:`setup_logging`, if any."""

    with _ACTIVE_LOCK:
        global _ACTIVE_HANDLER
        if _ACTIVE_HANDLER is None:
            return
        _detach(_ACTIVE_HANDLER)
        _ACTIVE_HANDLER = None
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


def _detach(handler: logging.Handler) -> None:
    for logger in (logging.getLogger(name) for name in list(logging.root.manager.loggerDict)):
        if handler in logger.handlers:
            logger.removeHandler(handler)
    handler.close()


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if not isinstance(parsed, int):
        raise ValueError(f"unknown log level: {value!r}")
    return parsed


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    moment = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return moment.isoformat(timespec="microseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    extras: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
            continue
        extras[key] = _normalize_json_value(value)
    return extras


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=repr) if isinstance(value, (set, frozenset)) else value
        return [_normalize_json_value(item) for item in items]
    return repr(value)


__all__ = [
    "JsonLineFormatter",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
]
