"""Logging configuration using Loguru.

This module provides:
- JSON lines (orjson) for deployed environments
- Colorized text for development
- Request-scoped context (request id, method, path) via a ContextVar
- Interception of standard library logging (uvicorn, pymongo, redis)
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
from loguru import logger


if TYPE_CHECKING:
    from loguru import Logger, Message, Record


_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

_NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "pymongo",
    "redis",
    "asyncio",
)


class InterceptHandler(logging.Handler):
    """Forward standard library log records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _serialize(record: Record) -> bytes:
    """Render a record as one JSON line including bound and request context."""
    fields: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        **_log_context.get(),
        **{k: v for k, v in record["extra"].items() if k != "name"},
    }
    exception = record["exception"]
    if exception:
        fields["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
        }
    return orjson.dumps(fields, default=str) + b"\n"


def _stdout_json_sink(message: Message) -> None:
    sys.stdout.buffer.write(_serialize(message.record))
    sys.stdout.flush()


def _format_record_dev(record: Record) -> str:
    """Build the colorized template for one record, appending request context."""
    context = _log_context.get()
    context_str = ""
    if context:
        # Escape braces so values are not treated as template fields.
        parts = " ".join(f"{k}={v}" for k, v in context.items())
        context_str = " | " + parts.replace("{", "{{").replace("}", "}}")

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
        f"{context_str} - "
        "<level>{message}</level>\n"
    )
    if record["exception"]:
        fmt += "{exception}\n"
    return fmt


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    *,
    is_development: bool = False,
    log_file: Path | str | None = None,
) -> None:
    """Configure Loguru sinks and route stdlib logging through them.

    Args:
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: ``"json"`` or ``"text"``.
        is_development: Force colorized text output.
        log_file: Optional path for a rotating JSON log file.
    """
    logger.remove()
    level = log_level.upper()

    if log_format == "json" and not is_development:
        logger.add(_stdout_json_sink, level=level, backtrace=True, diagnose=False)
    else:
        logger.add(
            sys.stdout,
            format=_format_record_dev,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format="{extra[serialized]}",
            filter=_attach_serialized,
            level=level,
            rotation="100 MB",
            retention="7 days",
            compression="gz",
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _attach_serialized(record: Record) -> bool:
    record["extra"]["serialized"] = _serialize(record).decode().rstrip("\n")
    return True


def get_logger(name: str) -> Logger:
    """Return the Loguru logger bound to ``name`` (usually ``__name__``)."""
    return logger.bind(name=name)


def bind_context(**kwargs: Any) -> None:
    """Add key/value pairs to every log entry emitted in the current context.

    Example:
        bind_context(request_id="abc-123", username="gordon")
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_context() -> None:
    """Reset the request logging context."""
    _log_context.set({})


def get_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
]
