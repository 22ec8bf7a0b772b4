"""
Structured Logging for the database utility layer

JSON structured logs with correlation IDs, OpenTelemetry trace context and
masking of credential-looking fields. Modules keep using
``logging.getLogger(__name__)``; this module only configures handlers.
"""

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from opentelemetry import trace

# Context variable for correlation tracking
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

SENSITIVE_FIELDS = frozenset({"password", "passwd", "secret", "token", "api_key", "dsn"})
MASK = "***"

# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "correlation_id",
        "trace_id",
        "span_id",
    }
)


class CorrelationFilter(logging.Filter):
    """Attach correlation and trace identifiers to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()

        span = trace.get_current_span()
        span_context = span.get_span_context()
        if span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")
            record.span_id = format(span_context.span_id, "016x")
        else:
            record.trace_id = None
            record.span_id = None

        return True


class DatabaseJSONFormatter(logging.Formatter):
    """JSON formatter for structured logs."""

    def __init__(self, include_extra: bool = True, sort_keys: bool = True) -> None:
        super().__init__()
        self.include_extra = include_extra
        self.sort_keys = sort_keys

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key in ("correlation_id", "trace_id", "span_id"):
            value = getattr(record, key, None)
            if value:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: MASK if key.lower() in SENSITIVE_FIELDS else self._serialize_value(value)
                for key, value in record.__dict__.items()
                if key not in _STANDARD_FIELDS and not key.startswith("_")
            }
            if extra:
                log_entry["extra"] = extra

        return json.dumps(log_entry, sort_keys=self.sort_keys, default=self._serialize_value)

    def _serialize_value(self, value: Any) -> Any:
        """Serialize complex values for JSON output."""
        if isinstance(value, Decimal):
            return float(value)
        elif isinstance(value, (set, frozenset)):
            return list(value)
        elif isinstance(value, (str, int, float, bool, type(None), list, dict)):
            return value
        return str(value)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    """Get current correlation ID."""
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Context manager for correlation ID scope, typically one HTTP request."""
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


def setup_structured_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level
        format_type: Formatter type ('json' or 'text')
        log_file: Optional log file path
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter
    if format_type == "json":
        formatter = DatabaseJSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    log_filter = CorrelationFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(log_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(log_filter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, level.upper()))

    logging.getLogger(__name__).debug("Structured logging configured")
