"""
Structured logger that never exposes sensitive data.

Context values whose key looks like a credential (password, token, secret,
API key, authorization header, cookie, card number) are replaced with
``[REDACTED]`` before the record reaches loguru. Stack traces are attached
only outside production.
"""

from typing import Any

from bytescart.config import get_settings
from bytescart.core.logging import logger

REDACTED = "[REDACTED]"

SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "apikey",
    "api_key",
    "authorization",
    "cookie",
    "creditcard",
)


def is_sensitive_key(key: str) -> bool:
    """Check whether a context key names sensitive material."""
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_KEYS)


def sanitize_log_context(context: dict[str, Any] | None) -> dict[str, Any]:
    """
    Strip sensitive fields from log context.

    Args:
        context: Arbitrary key/value context (not modified)

    Returns:
        Copy of the context with sensitive values redacted
    """
    if not context:
        return {}
    return {
        key: REDACTED if is_sensitive_key(key) else value
        for key, value in context.items()
    }


class SecureLog:
    """Thin loguru wrapper applying context redaction."""

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        logger.bind(**sanitize_log_context(context)).info(message)

    def warn(self, message: str, context: dict[str, Any] | None = None) -> None:
        logger.bind(**sanitize_log_context(context)).warning(message)

    def error(
        self,
        message: str,
        error: BaseException | object | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Log an error with optional exception details.

        Args:
            message: Human readable message
            error: Exception (or any value) describing the failure
            context: Extra context, redacted before logging
        """
        fields = sanitize_log_context(context)
        if error is not None:
            fields["error_message"] = str(error)

        bound = logger.bind(**fields)
        if isinstance(error, BaseException) and not get_settings().is_production:
            bound.opt(exception=error).error(message)
        else:
            bound.error(message)


secure_log = SecureLog()
