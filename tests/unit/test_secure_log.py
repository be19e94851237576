"""Tests for the redacting structured logger."""

import pytest
from loguru import logger

from bytescart.core.secure_log import (
    REDACTED,
    is_sensitive_key,
    sanitize_log_context,
    secure_log,
)


@pytest.fixture
def captured():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.mark.parametrize(
    "key",
    [
        "password",
        "accessToken",
        "STRIPE_SECRET_KEY",
        "apiKey",
        "x_api_key",
        "Authorization",
        "cookie",
        "creditCard",
    ],
)
def test_sensitive_keys(key):
    """Test credential-like keys are detected regardless of case."""
    assert is_sensitive_key(key)


def test_non_sensitive_keys():
    assert not is_sensitive_key("store_id")
    assert not is_sensitive_key("domain")


def test_sanitize_log_context_redacts_and_copies():
    """Test sensitive values are replaced and the input is left untouched."""
    # Arrange
    context = {"store_id": "s1", "access_token": "abc", "password": "hunter2"}

    # Act
    sanitized = sanitize_log_context(context)

    # Assert
    assert sanitized == {"store_id": "s1", "access_token": REDACTED, "password": REDACTED}
    assert context["access_token"] == "abc"
    assert sanitize_log_context(None) == {}


def test_info_binds_sanitized_context(captured):
    secure_log.info("Store updated", {"store_id": "s1", "token": "secret-value"})

    record = captured[-1]
    assert record["level"].name == "INFO"
    assert record["message"] == "Store updated"
    assert record["extra"]["store_id"] == "s1"
    assert record["extra"]["token"] == REDACTED


def test_warn_logs_warning(captured):
    secure_log.warn("Slow provider", {"provider": "stripe"})

    assert captured[-1]["level"].name == "WARNING"
    assert captured[-1]["extra"]["provider"] == "stripe"


def test_error_includes_message_and_traceback_outside_production(captured):
    """Test errors carry the exception message and, in development, the exception."""
    # Arrange
    try:
        raise ValueError("boom")
    except ValueError as e:
        error = e

    # Act
    secure_log.error("Audit write failed", error, {"cookie": "sb=1"})

    # Assert
    record = captured[-1]
    assert record["level"].name == "ERROR"
    assert record["extra"]["error_message"] == "boom"
    assert record["extra"]["cookie"] == REDACTED
    assert record["exception"] is not None


def test_error_accepts_non_exception_values(captured):
    secure_log.error("Provider said no", "rate limited")

    record = captured[-1]
    assert record["extra"]["error_message"] == "rate limited"
    assert record["exception"] is None
