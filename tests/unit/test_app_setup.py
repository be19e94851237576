"""Tests for application setup utilities."""

from unittest.mock import MagicMock, patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from bytescart import __version__
from bytescart.app_setup import add_root_endpoint, setup_app
from bytescart.middleware import SecurityHeadersMiddleware


def middleware_classes(app: FastAPI) -> list:
    return [middleware.cls for middleware in app.user_middleware]


@patch("bytescart.app_setup.get_settings")
def test_setup_app_adds_security_headers(mock_get_settings):
    """Test that setup_app installs the security headers middleware."""
    app = FastAPI()
    mock_get_settings.return_value = MagicMock(
        security_headers_enabled=True, is_production=False
    )

    setup_app(app)

    assert SecurityHeadersMiddleware in middleware_classes(app)
    assert app.user_middleware[0].kwargs == {"enable_hsts": False}


@patch("bytescart.app_setup.get_settings")
def test_setup_app_enables_hsts_in_production(mock_get_settings):
    app = FastAPI()
    mock_get_settings.return_value = MagicMock(security_headers_enabled=True, is_production=True)

    setup_app(app)

    assert app.user_middleware[0].kwargs == {"enable_hsts": True}


@patch("bytescart.app_setup.get_settings")
def test_setup_app_headers_disabled(mock_get_settings):
    app = FastAPI()
    mock_get_settings.return_value = MagicMock(security_headers_enabled=False)

    setup_app(app)

    assert SecurityHeadersMiddleware not in middleware_classes(app)


@patch("bytescart.app_setup.get_settings")
def test_root_endpoint_response_with_docs(mock_get_settings):
    """Test root endpoint response when docs are enabled."""
    app = FastAPI()
    mock_settings = MagicMock()
    mock_settings.project_name = "ByteScart Backend"
    mock_settings.enable_docs = True
    mock_get_settings.return_value = mock_settings

    add_root_endpoint(app)

    response = TestClient(app).get("/")

    assert response.status_code == 200
    assert response.json() == {
        "message": "ByteScart Backend",
        "version": __version__,
        "docs": "/docs",
    }


@patch("bytescart.app_setup.get_settings")
def test_root_endpoint_response_without_docs(mock_get_settings):
    """Test root endpoint response when docs are disabled."""
    app = FastAPI()
    mock_settings = MagicMock()
    mock_settings.project_name = "ByteScart Backend"
    mock_settings.enable_docs = False
    mock_get_settings.return_value = mock_settings

    add_root_endpoint(app)

    with TestClient(app) as client:
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] is None
