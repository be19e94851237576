"""Tests for logging configuration."""

import logging
from unittest.mock import patch

from bytescart.core.logging import InterceptHandler, add_trace_id, intercept_standard_logging
from bytescart.core.trace_context import trace_id_context
from bytescart.core.uvicorn_filters import QuietPathsFilter


def test_add_trace_id_from_context():
    """Test add_trace_id copies the request trace id into the record."""
    # Arrange
    record = {"extra": {}}
    token = trace_id_context.set("trace-abc-123")

    # Act
    try:
        result = add_trace_id(record)
    finally:
        trace_id_context.reset(token)

    # Assert
    assert result is True
    assert record["extra"]["trace_id"] == "trace-abc-123"


def test_add_trace_id_without_request():
    record = {"extra": {}}

    add_trace_id(record)

    assert record["extra"]["trace_id"] == "N/A"


def test_intercept_handler_forwards_to_loguru():
    """Test standard logging records are re-emitted through loguru."""
    # Arrange
    handler = InterceptHandler()
    record = logging.LogRecord("httpx", logging.WARNING, __file__, 10, "slow %s", ("call",), None)

    # Act
    with patch("bytescart.core.logging.logger") as mock_logger:
        handler.emit(record)

    # Assert
    mock_logger.opt.return_value.log.assert_called_once_with("WARNING", "slow call")


def test_intercept_standard_logging():
    # Act
    intercept_standard_logging()

    # Assert
    for name in ["uvicorn", "uvicorn.access", "httpx"]:
        configured = logging.getLogger(name)
        assert isinstance(configured.handlers[0], InterceptHandler)
        assert configured.propagate is False

    access_filters = logging.getLogger("uvicorn.access").filters
    assert any(isinstance(f, QuietPathsFilter) for f in access_filters)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
