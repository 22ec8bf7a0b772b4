"""
Unit tests for structured logging.
"""

# Standard library imports
import json
import logging
import sys
from contextlib import contextmanager

# Third-party imports
import pytest
from opentelemetry import trace
from opentelemetry.trace import NonRecordingSpan, SpanContext

# Local imports
from erp_db.infrastructure.monitoring.logging import (
    MASK,
    CorrelationFilter,
    DatabaseJSONFormatter,
    correlation_context,
    generate_correlation_id,
    get_correlation_id,
    setup_structured_logging,
)


def make_record(message="query executed", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="erp_db.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=exc_info,
        func="handler",
    )
    record.__dict__.update(extra)
    return record


@contextmanager
def preserved_root_logger():
    """Restore root handlers and level after reconfiguring logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    # Detached so setup never closes handlers it did not create
    root.handlers = []
    try:
        yield root
    finally:
        for handler in root.handlers[:]:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)


@pytest.mark.unit
class TestDatabaseJSONFormatter:
    """Test DatabaseJSONFormatter."""

    def test_basic_fields(self):
        """Test the core JSON fields."""
        entry = json.loads(DatabaseJSONFormatter().format(make_record()))

        assert entry["message"] == "query executed"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "erp_db.test"
        assert entry["function"] == "handler"
        assert entry["line"] == 10
        assert "timestamp" in entry

    def test_extra_fields_are_included(self):
        """Test values passed through ``extra`` are serialized."""
        record = make_record(attempt=2, delay=200.0, tables={"users"})

        entry = json.loads(DatabaseJSONFormatter().format(record))

        assert entry["extra"] == {"attempt": 2, "delay": 200.0, "tables": ["users"]}

    def test_sensitive_fields_are_masked(self):
        """Test credential-looking keys never reach the output."""
        record = make_record(password="hunter2", DSN="postgresql://u:p@db/erp")

        output = DatabaseJSONFormatter().format(record)
        entry = json.loads(output)

        assert entry["extra"]["password"] == MASK
        assert entry["extra"]["DSN"] == MASK
        assert "hunter2" not in output

    def test_extra_can_be_disabled(self):
        """Test include_extra=False drops extra fields."""
        entry = json.loads(DatabaseJSONFormatter(include_extra=False).format(make_record(a=1)))

        assert "extra" not in entry

    def test_exception_info(self):
        """Test exceptions are rendered as a nested object."""
        try:
            raise ValueError("bad row")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        entry = json.loads(DatabaseJSONFormatter().format(record))

        assert entry["exception"]["type"] == "ValueError"
        assert entry["exception"]["message"] == "bad row"
        assert "Traceback" in entry["exception"]["traceback"]


@pytest.mark.unit
class TestCorrelation:
    """Test correlation id helpers and the log filter."""

    def test_context_sets_and_resets(self):
        """Test the id is scoped to the context."""
        assert get_correlation_id() is None

        with correlation_context("req-123") as correlation_id:
            assert correlation_id == "req-123"
            assert get_correlation_id() == "req-123"

        assert get_correlation_id() is None

    def test_context_generates_id(self):
        """Test an id is generated when none is given."""
        with correlation_context() as correlation_id:
            assert len(correlation_id) == 36

        assert generate_correlation_id() != generate_correlation_id()

    def test_filter_adds_correlation_id(self):
        """Test the filter copies the current id onto records."""
        record = make_record()

        with correlation_context("req-9"):
            assert CorrelationFilter().filter(record) is True

        assert record.correlation_id == "req-9"
        assert record.trace_id is None
        assert record.span_id is None

    def test_filter_adds_trace_context(self):
        """Test trace and span ids come from the current span."""
        span = NonRecordingSpan(
            SpanContext(trace_id=0x1234, span_id=0x5678, is_remote=False)
        )
        record = make_record()

        with trace.use_span(span, end_on_exit=False):
            CorrelationFilter().filter(record)

        assert record.trace_id == format(0x1234, "032x")
        assert record.span_id == format(0x5678, "016x")

    def test_json_output_includes_correlation_id(self):
        """Test formatted records carry the correlation id."""
        record = make_record()

        with correlation_context("req-1"):
            CorrelationFilter().filter(record)

        entry = json.loads(DatabaseJSONFormatter().format(record))

        assert entry["correlation_id"] == "req-1"
        assert "trace_id" not in entry


@pytest.mark.unit
class TestSetupStructuredLogging:
    """Test setup_structured_logging."""

    def test_json_console_handler(self):
        """Test json format installs the JSON formatter."""
        with preserved_root_logger() as root:
            setup_structured_logging(level="debug", format_type="json")

            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert isinstance(handler.formatter, DatabaseJSONFormatter)
            assert any(isinstance(f, CorrelationFilter) for f in handler.filters)
            assert root.level == logging.DEBUG

    def test_text_format_with_file(self, tmp_path):
        """Test a log file adds a second handler."""
        log_file = tmp_path / "erp_db.log"

        with preserved_root_logger() as root:
            setup_structured_logging(level="WARNING", log_file=str(log_file))

            assert len(root.handlers) == 2
            assert not isinstance(root.handlers[0].formatter, DatabaseJSONFormatter)
            assert root.level == logging.WARNING

            logging.getLogger("erp_db.test").warning("pool exhausted")
            for handler in root.handlers:
                handler.flush()

        assert "pool exhausted" in log_file.read_text()

    def test_reconfiguring_closes_replaced_handlers(self, tmp_path):
        """Test a second setup closes the file opened by the first one."""
        with preserved_root_logger() as root:
            setup_structured_logging(log_file=str(tmp_path / "first.log"))
            [first_file_handler] = [h for h in root.handlers if isinstance(h, logging.FileHandler)]

            setup_structured_logging(log_file=str(tmp_path / "second.log"))

            assert first_file_handler.stream is None
            assert first_file_handler not in root.handlers
