"""
Logging configuration.

JSON lines in production, a pipe-separated text format elsewhere. Both
formats carry the request id bound by RequestIDMiddleware.
"""

import json
import logging
import sys
import time
from contextvars import ContextVar, Token
from typing import Any, Optional
from uuid import uuid4

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"

NOISY_LOGGERS = ("asyncio", "web3", "urllib3", "httpcore")

# Attributes every LogRecord carries; anything else came from `extra=`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "request_id"}


class RequestIdFilter(logging.Filter):
    """Stamp each record with the request id of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; `extra=` fields are merged at top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        request_id = getattr(record, "request_id", None)
        if request_id and request_id != "-":
            entry["request_id"] = request_id

        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Logging level name
        json_logs: Emit JSON lines instead of plain text
    """
    numeric_level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_logs:
        handler.setFormatter(JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, "%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not json_logs:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def bind_request_id(request_id: Optional[str] = None) -> Token:
    """
    Bind a request id to the current context.

    Args:
        request_id: Incoming id, or None to generate one

    Returns:
        Token for reset_request_id()
    """
    return request_id_ctx.set(request_id or uuid4().hex)


def reset_request_id(token: Token) -> None:
    request_id_ctx.reset(token)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def log_performance(
    logger: logging.Logger, operation: str, start_time: float, **fields: Any
) -> float:
    """
    Log how long an operation took since start_time.

    Args:
        logger: Logger to write to
        operation: Operation name
        start_time: time.perf_counter() value taken at the start
        **fields: Extra structured fields

    Returns:
        Duration in seconds
    """
    duration = time.perf_counter() - start_time
    logger.info(
        f"{operation} took {duration * 1000:.1f}ms",
        extra={
            "operation": operation,
            "duration_ms": round(duration * 1000, 2),
            **fields,
        },
    )
    return duration
