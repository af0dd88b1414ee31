"""Tests for logging configuration."""

import logging
from unittest.mock import patch

from loguru import logger

from oauth2_registry.core.logging import (
    InterceptHandler,
    add_trace_id,
    configure_logger,
    intercept_standard_logging,
)
from oauth2_registry.core.trace_context import trace_id_context
from oauth2_registry.core.uvicorn_filters import HealthCheckFilter


def make_record(message: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("uvicorn.access", level, __file__, 1, message, None, None)


def test_add_trace_id_without_context():
    """Test records outside a request get N/A."""
    record = {"extra": {}}

    assert add_trace_id(record) is True
    assert record["extra"]["trace_id"] == "N/A"


def test_add_trace_id_with_context():
    """Test records inside a request get its trace id."""
    token = trace_id_context.set("trace-123")
    try:
        record = {"extra": {}}
        add_trace_id(record)
    finally:
        trace_id_context.reset(token)

    assert record["extra"]["trace_id"] == "trace-123"


def test_configure_logger_serialize():
    """Test JSON output is enabled from settings."""
    with patch("oauth2_registry.core.logging.settings") as settings, patch(
        "oauth2_registry.core.logging.logger"
    ) as mock_logger:
        settings.log_level = "debug"
        settings.log_serialize = True
        settings.debug = False
        settings.logger_enqueue = False

        configure_logger()

    mock_logger.remove.assert_called_once()
    kwargs = mock_logger.add.call_args.kwargs
    assert kwargs["level"] == "DEBUG"
    assert kwargs["serialize"] is True
    assert kwargs["colorize"] is False


def test_intercept_handler_forwards_to_loguru():
    """Test standard logging records reach loguru."""
    messages = []
    handler_id = logger.add(messages.append, format="{message}")
    try:
        InterceptHandler().emit(make_record("from pynamodb"))
    finally:
        logger.remove(handler_id)

    assert any("from pynamodb" in message for message in messages)


def test_intercept_handler_unknown_level():
    """Test custom numeric levels are passed through."""
    messages = []
    handler_id = logger.add(messages.append, format="{message}", level=0)
    try:
        record = make_record("custom level", level=25)
        record.levelname = "NOTICE"
        InterceptHandler().emit(record)
    finally:
        logger.remove(handler_id)

    assert any("custom level" in message for message in messages)


def test_intercept_standard_logging():
    """Test library loggers are redirected and filtered."""
    intercept_standard_logging()

    for name in ("uvicorn", "uvicorn.access", "pynamodb"):
        library_logger = logging.getLogger(name)
        assert library_logger.propagate is False
        assert any(isinstance(h, InterceptHandler) for h in library_logger.handlers)

    assert any(
        isinstance(f, HealthCheckFilter)
        for f in logging.getLogger("uvicorn.access").filters
    )


def test_health_check_filter():
    health_filter = HealthCheckFilter()

    assert not health_filter.filter(
        make_record('10.0.12.168:43306 - "GET /health HTTP/1.1" 200')
    )
    assert health_filter.filter(
        make_record('10.0.12.168:43306 - "POST /oauth2-clients HTTP/1.1" 200')
    )


def test_health_check_filter_ignores_query_string():
    record = make_record('10.0.0.1:1 - "GET /health?check=alb HTTP/1.1" 200')

    assert not HealthCheckFilter().filter(record)


def test_health_check_filter_reads_uvicorn_args():
    """Test the path is taken from uvicorn's record arguments."""
    record = logging.LogRecord(
        "uvicorn.access",
        logging.INFO,
        __file__,
        1,
        '%s - "%s %s HTTP/%s" %d',
        ("10.0.0.1:1", "GET", "/health", "1.1", 200),
        None,
    )

    assert not HealthCheckFilter().filter(record)


def test_health_check_filter_keeps_unparsed_lines():
    assert HealthCheckFilter().filter(make_record("Started server process"))


def test_intercept_standard_logging_adds_filter_once():
    intercept_standard_logging()
    intercept_standard_logging()

    filters = logging.getLogger("uvicorn.access").filters
    assert sum(isinstance(f, HealthCheckFilter) for f in filters) == 1
