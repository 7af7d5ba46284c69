"""Tests for structured logging module.

Tests verify:
- Structured logging with JSON format
- Log output is valid JSON with timestamp, level, event, logger_name
- Trace and span ids of the active span are attached
"""

import json
from collections.abc import Generator
from io import StringIO

import pytest
from opentelemetry.sdk.trace import TracerProvider


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Restore default logging configuration after each test."""
    yield
    from demo_service.core.logging import configure_logging

    configure_logging(force=True)


def _configure_to_stream(level: str = "INFO") -> StringIO:
    from demo_service.core.logging import configure_logging, reset_logging

    reset_logging()
    stream = StringIO()
    configure_logging(level=level, stream=stream, force=True)
    return stream


class TestConfigureLogging:
    """Test configure_logging() function."""

    def test_configure_logging_only_runs_once(self) -> None:
        """Second call without force is a no-op."""
        from demo_service.core.logging import configure_logging, get_logger

        stream = _configure_to_stream(level="DEBUG")
        configure_logging(level="ERROR")  # Would filter debug if it ran again

        get_logger("once.test").debug("still here")
        assert stream.getvalue() != ""

    def test_configure_logging_force_reconfigures(self) -> None:
        from demo_service.core.logging import configure_logging, get_logger

        stream = _configure_to_stream(level="DEBUG")
        configure_logging(level="ERROR", stream=stream, force=True)

        get_logger("force.test").info("filtered")
        assert stream.getvalue() == ""


class TestGetLogger:
    """Test get_logger() function."""

    def test_get_logger_returns_logger(self) -> None:
        from demo_service.core.logging import get_logger, reset_logging

        reset_logging()
        logger = get_logger("test.module")
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    def test_get_logger_binds_name(self) -> None:
        from demo_service.core.logging import get_logger

        stream = _configure_to_stream()
        get_logger("my.module.name").info("named")

        log_record = json.loads(stream.getvalue().strip())
        assert log_record["logger_name"] == "my.module.name"

    def test_logger_created_before_configure_uses_new_config(self) -> None:
        """Module-level loggers pick up configuration applied later."""
        from demo_service.core.logging import get_logger

        first = _configure_to_stream()
        logger = get_logger("early.test")
        logger.info("before")

        second = _configure_to_stream()
        logger.info("after")

        assert "before" in first.getvalue()
        assert "after" not in first.getvalue()
        assert json.loads(second.getvalue().strip())["event"] == "after"
        assert json.loads(second.getvalue().strip())["logger_name"] == "early.test"

    def test_module_loggers_import_cleanly(self) -> None:
        """Modules that create loggers at import time load without errors."""
        import importlib

        for module in (
            "demo_service.main",
            "demo_service.api.error_handlers",
            "demo_service.api.routes.root",
            "demo_service.observability.tracing",
            "demo_service.services.resources",
        ):
            assert importlib.import_module(module).logger is not None


class TestJSONOutput:
    """Test that log output is valid JSON."""

    def test_log_output_has_standard_fields(self) -> None:
        from demo_service.core.logging import get_logger

        stream = _configure_to_stream()
        get_logger("json.test").info("Test message", status="200 OK")

        log_record = json.loads(stream.getvalue().strip())
        assert log_record["event"] == "Test message"
        assert log_record["level"] == "info"
        assert log_record["status"] == "200 OK"
        assert "timestamp" in log_record

    def test_debug_not_logged_at_info_level(self) -> None:
        from demo_service.core.logging import get_logger

        stream = _configure_to_stream()
        get_logger("filter.test").debug("Debug message")

        assert stream.getvalue() == ""


class TestTraceContext:
    """Test trace/span ids are added inside an active span."""

    def test_no_trace_ids_outside_span(self) -> None:
        from demo_service.core.logging import get_logger

        stream = _configure_to_stream()
        get_logger("untraced.test").info("no span")

        log_record = json.loads(stream.getvalue().strip())
        assert "trace_id" not in log_record
        assert "span_id" not in log_record

    def test_trace_ids_inside_span(self) -> None:
        from demo_service.core.logging import get_logger

        stream = _configure_to_stream()
        tracer = TracerProvider().get_tracer("logging-test")

        with tracer.start_as_current_span("work") as span:
            get_logger("traced.test").info("in span")
            span_context = span.get_span_context()

        log_record = json.loads(stream.getvalue().strip())
        assert log_record["trace_id"] == format(span_context.trace_id, "032x")
        assert log_record["span_id"] == format(span_context.span_id, "016x")
