"""Tests for the Uvicorn access log filter."""

import logging

import pytest

from bytescart.core.uvicorn_filters import QuietPathsFilter


def access_record(request_line: str, status: int = 200) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s" %d',
        args=("10.0.12.168:43306", request_line, status),
        exc_info=None,
    )


@pytest.mark.parametrize(
    "request_line",
    [
        "GET /health HTTP/1.1",
        "GET /health/public HTTP/1.1",
        "GET /api/domain-lookup?hostname=shop.example.com HTTP/1.1",
    ],
)
def test_quiet_paths_are_dropped(request_line):
    assert QuietPathsFilter().filter(access_record(request_line)) is False


@pytest.mark.parametrize(
    "request_line",
    [
        "POST /api/domains/check-status HTTP/1.1",
        "GET /health/extra HTTP/1.1",
        "GET /skeletons/minimal HTTP/1.1",
    ],
)
def test_other_paths_are_kept(request_line):
    assert QuietPathsFilter().filter(access_record(request_line)) is True


def test_non_access_messages_are_kept():
    record = logging.LogRecord("uvicorn.error", logging.INFO, __file__, 1, "Started", None, None)

    assert QuietPathsFilter().filter(record) is True


def test_custom_paths():
    quiet = QuietPathsFilter(paths=frozenset({"/metrics"}))

    assert quiet.filter(access_record("GET /metrics HTTP/1.1")) is False
    assert quiet.filter(access_record("GET /health HTTP/1.1")) is True
