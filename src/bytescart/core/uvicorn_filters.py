"""
Logging filters for the Uvicorn access log.

Probes hit ``/health`` every few seconds and the storefront edge calls the
domain lookup on every custom-domain request; neither is worth a log line.
"""

import logging
import re

QUIET_PATHS = frozenset({"/health", "/health/public", "/api/domain-lookup", "/favicon.ico"})

# Uvicorn access format: '10.0.12.168:43306 - "GET /health HTTP/1.1" 200'
_REQUEST_LINE_RE = re.compile(r'"[A-Z]+ (?P<path>[^ ?"]+)[^"]*"')


class QuietPathsFilter(logging.Filter):
    """Drop access log records for high-frequency paths."""

    def __init__(self, paths: frozenset[str] = QUIET_PATHS):
        super().__init__()
        self.paths = paths

    def filter(self, record: logging.LogRecord) -> bool:
        match = _REQUEST_LINE_RE.search(record.getMessage())
        return not (match and match.group("path") in self.paths)
