"""
Structured logging for the order core.

Log calls take keyword context instead of pre-formatted strings:

    logger.info("Order settled", order_id=12, total_cents=550)

Production emits one JSON object per line; development gets a compact
coloured line. Both include the operation id of the unit of work that
emitted the record (see shared.infrastructure.correlation).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

_NO_OPERATION = "-"


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    """Keyword context attached by StructuredLogger, or an empty dict."""
    return getattr(record, "extra_data", None) or {}


def _operation_of(record: logging.LogRecord) -> str | None:
    operation_id = getattr(record, "operation_id", None)
    if not operation_id or operation_id == _NO_OPERATION:
        return None
    return operation_id


class StructuredFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = _operation_of(record)
        if operation_id:
            entry["operation_id"] = operation_id

        context = _context_of(record)
        if context:
            entry["data"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            entry["source"] = f"{record.filename}:{record.lineno} in {record.funcName}"

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Readable single-line output with the level in colour."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        parts = [f"{color}{clock} {record.levelname:<8}{self.RESET}"]

        operation_id = _operation_of(record)
        if operation_id:
            parts.append(f"{self.DIM}{operation_id[:8]}{self.RESET}")

        parts.append(f"{record.name}: {record.getMessage()}")

        context = _context_of(record)
        if context:
            parts.append(" ".join(f"{key}={value}" for key, value in context.items()))

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods accept keyword context."""

    def _emit(self, level: int, msg: str, args: tuple, context: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = context.pop("exc_info", None)
        extra = context.pop("extra", None) or {}
        extra["extra_data"] = context or None
        self._log(level, msg, args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.DEBUG, msg, args, context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.INFO, msg, args, context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.WARNING, msg, args, context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.ERROR, msg, args, context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, context)


logging.setLoggerClass(StructuredLogger)


def setup_logging(level: int | None = None) -> None:
    """
    Install the order core's log handler on the root logger.

    Call once at process start (the CLI does this in its callback).
    """
    from shared.infrastructure.correlation import CorrelationIdFilter

    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        StructuredFormatter() if settings.environment == "production" else DevelopmentFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # SQL echo is controlled by settings.db_echo, not by the root level
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Logger for a module.

    Usage:
        logger = get_logger(__name__)
        logger.info("Order placed", order_id=123, items_count=2)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_login(login: str | None) -> str:
    """Shorten a user login for logs: "alice" -> "al***"."""
    if not login:
        return "<no-login>"
    return f"{login[:2] if len(login) > 2 else login[0]}***"


# Component loggers
ledger_logger = get_logger("cafe_pos.ledger")
tracker_logger = get_logger("cafe_pos.tracker")
engine_logger = get_logger("cafe_pos.engine")
