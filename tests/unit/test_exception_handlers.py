"""
Unit tests for exception handlers.

Tests error response formatting and status code mapping.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError

from bytescart.exception_handlers import (
    RouteError,
    general_exception_handler,
    http_exception_handler,
    route_error_handler,
    validation_exception_handler,
)


@pytest.fixture
def request_mock():
    request = MagicMock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/domains/check-status"
    return request


def body(response) -> dict:
    return json.loads(response.body)


# ===========================
# Route Error Handler Tests
# ===========================


@pytest.mark.asyncio
async def test_route_error_handler_returns_error_body(request_mock):
    """Test RouteError renders as a plain error body."""
    # Arrange
    exc = RouteError(404, "Store not found or unauthorized")

    # Act
    response = await route_error_handler(request_mock, exc)

    # Assert
    assert response.status_code == 404
    assert body(response) == {"error": "Store not found or unauthorized"}


@pytest.mark.asyncio
async def test_route_error_handler_keeps_headers(request_mock):
    exc = RouteError(429, "Too many requests", headers={"Retry-After": "30"})

    response = await route_error_handler(request_mock, exc)

    assert response.status_code == 429
    assert response.headers["retry-after"] == "30"


def test_route_error_message():
    assert str(RouteError(400, "Store ID is required")) == "Store ID is required"


# ===========================
# HTTP Exception Handler Tests
# ===========================


@pytest.mark.asyncio
async def test_http_exception_handler_400(request_mock):
    """Test HTTP exception handler with 400 status."""
    # Arrange
    exc = HTTPException(status_code=400, detail="Invalid request parameters")

    # Act
    response = await http_exception_handler(request_mock, exc)

    # Assert
    assert response.status_code == 400
    assert body(response) == {
        "type": "https://datatracker.ietf.org/doc/html/rfc7231#section-6.5.1",
        "title": "Bad Request",
        "status": 400,
        "detail": "Invalid request parameters",
        "instance": "/api/domains/check-status",
    }


@pytest.mark.asyncio
async def test_http_exception_handler_401(request_mock):
    """Test HTTP exception handler with 401 unauthorized."""
    exc = HTTPException(status_code=401, detail="Authentication required")

    response = await http_exception_handler(request_mock, exc)

    assert response.status_code == 401
    assert body(response)["type"] == "https://datatracker.ietf.org/doc/html/rfc7235#section-3.1"


@pytest.mark.asyncio
async def test_http_exception_handler_405_keeps_allow_header(request_mock):
    exc = HTTPException(status_code=405, detail="Method Not Allowed", headers={"Allow": "POST"})

    response = await http_exception_handler(request_mock, exc)

    assert response.status_code == 405
    assert response.headers["allow"] == "POST"
    assert body(response)["title"] == "Method Not Allowed"


@pytest.mark.asyncio
async def test_http_exception_handler_500(request_mock):
    """Test HTTP exception handler with 500 internal error."""
    exc = HTTPException(status_code=500, detail="Internal server error")

    response = await http_exception_handler(request_mock, exc)

    assert response.status_code == 500
    assert body(response)["title"] == "Internal Server Error"


# ===========================
# General Exception Handler Tests
# ===========================


@pytest.mark.asyncio
async def test_general_exception_handler_hides_details(request_mock):
    """Test unexpected errors never leak their message."""
    # Arrange
    exc = RuntimeError("database password is hunter2")

    # Act
    response = await general_exception_handler(request_mock, exc)

    # Assert
    assert response.status_code == 500
    payload = body(response)
    assert payload["status"] == 500
    assert payload["detail"] == "An unexpected error occurred. Please try again later."
    assert "hunter2" not in response.body.decode()


# ===========================
# Validation Exception Handler Tests
# ===========================


@pytest.mark.asyncio
async def test_validation_exception_handler_single_error(request_mock):
    """Test validation errors are reported as 400 with field details."""
    # Arrange
    exc = RequestValidationError(
        [
            {
                "type": "missing",
                "loc": ("body", "price"),
                "msg": "Field required",
                "input": {},
            }
        ]
    )

    # Act
    response = await validation_exception_handler(request_mock, exc)

    # Assert
    assert response.status_code == 400
    payload = body(response)
    assert payload["title"] == "Validation Error"
    assert payload["detail"] == "One or more validation errors occurred (1 error)."
    assert payload["errors"] == [
        {"type": "missing", "loc": ["body", "price"], "msg": "Field required", "input": {}}
    ]


@pytest.mark.asyncio
async def test_validation_exception_handler_multiple_errors_with_context(request_mock):
    exc = RequestValidationError(
        [
            {
                "type": "greater_than",
                "loc": ("body", "price", 0),
                "msg": "Input should be greater than 0",
                "input": -1,
                "ctx": {"gt": 0},
            },
            {
                "type": "string_too_short",
                "loc": ("body", "name"),
                "msg": "String should have at least 1 character",
                "input": "",
            },
        ]
    )

    response = await validation_exception_handler(request_mock, exc)

    payload = body(response)
    assert payload["detail"] == "One or more validation errors occurred (2 errors)."
    assert payload["errors"][0]["loc"] == ["body", "price", "0"]
    assert payload["errors"][0]["ctx"] == {"gt": "0"}
