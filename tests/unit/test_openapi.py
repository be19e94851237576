"""Tests for OpenAPI schema customization."""

from fastapi import FastAPI
from pydantic import BaseModel

from bytescart.openapi import TAGS, configure_openapi, custom_openapi


class Item(BaseModel):
    name: str


def build_app() -> FastAPI:
    app = FastAPI(version="1.0.0")

    @app.post("/items")
    async def create_item(item: Item):
        return item

    return app


def test_custom_openapi_generates_schema():
    """Test that custom_openapi generates a valid OpenAPI schema."""
    schema = custom_openapi(build_app())

    assert "openapi" in schema
    assert schema["info"]["version"] == "1.0.0"
    assert schema["tags"] == TAGS


def test_custom_openapi_caches_schema():
    """Test that custom_openapi caches the schema after first generation."""
    app = build_app()

    schema1 = custom_openapi(app)
    schema2 = custom_openapi(app)

    assert schema1 is schema2


def test_custom_openapi_returns_existing_schema():
    """Test that custom_openapi returns existing schema if already set."""
    app = FastAPI()
    existing_schema = {
        "openapi": "3.0.0",
        "info": {"title": "Test", "version": "1.0.0"},
    }
    app.openapi_schema = existing_schema

    assert custom_openapi(app) is existing_schema


def test_validation_errors_documented_as_400_problem_details():
    """Test FastAPI's 422 response is replaced by a 400 ProblemDetail."""
    schema = custom_openapi(build_app())

    responses = schema["paths"]["/items"]["post"]["responses"]
    assert "422" not in responses
    assert responses["400"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/ProblemDetail"
    }
    assert "ProblemDetail" in schema["components"]["schemas"]


def test_security_schemes():
    schema = custom_openapi(build_app())

    schemes = schema["components"]["securitySchemes"]
    assert schemes["BearerAuth"]["scheme"] == "bearer"
    assert schemes["CookieAuth"] == {
        "type": "apiKey",
        "in": "cookie",
        "name": "sb-access-token",
        "description": "Auth provider session cookie",
    }


def test_configure_openapi():
    app = build_app()

    configure_openapi(app)

    assert app.openapi()["tags"] == TAGS
