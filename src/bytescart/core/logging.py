"""
loguru setup for ByteScart.

Every record carries the trace id of the request that produced it. In
production records are written as JSON; elsewhere they are colorized text.
Standard library loggers are routed into the same sink.
"""

import logging
import sys
from typing import Any

from loguru import logger

from bytescart.config import settings
from bytescart.core.trace_context import trace_id_context
from bytescart.core.uvicorn_filters import QuietPathsFilter

# Library loggers forwarded into loguru, with the minimum level kept.
# None leaves the level to logging.basicConfig.
INTERCEPTED_LOGGERS: dict[str, int | None] = {
    "uvicorn": None,
    "uvicorn.access": None,
    "uvicorn.error": None,
    "httpx": None,
    "fastapi": None,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "sqlalchemy.orm": logging.WARNING,
}


def add_trace_id(record: dict[str, Any]) -> bool:
    """Stamp ``extra.trace_id`` on a loguru record; "N/A" outside a request."""
    record["extra"]["trace_id"] = trace_id_context.get() or "N/A"
    return True


def configure_logger() -> None:
    production = settings.is_production
    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        filter=add_trace_id,
        colorize=not production,
        serialize=production,
        backtrace=True,
        diagnose=not production,
        enqueue=settings.logger_enqueue,
    )


configure_logger()


__all__ = ["logger", "InterceptHandler", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """Re-emit ``logging`` records through loguru so they share its sink."""

    def emit(self, record: logging.LogRecord) -> None:
        logger.opt(depth=6, exception=record.exc_info).log(
            record.levelname, record.getMessage()
        )


def intercept_standard_logging() -> None:
    """
    Route uvicorn, httpx, fastapi and sqlalchemy logging into loguru.

    Called once by the process entry points (``main`` and ``lambda_main``).
    Health probes are dropped from the uvicorn access log.
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for name, level in INTERCEPTED_LOGGERS.items():
        library_logger = logging.getLogger(name)
        library_logger.handlers = [InterceptHandler()]
        library_logger.propagate = False
        if level is not None:
            library_logger.setLevel(level)

    logging.getLogger("uvicorn.access").addFilter(QuietPathsFilter())
