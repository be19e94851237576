"""
Application setup utilities.

Provides common setup functions for both main.py and lambda_main.py
to avoid code duplication.
"""

from fastapi import FastAPI

from bytescart import __version__
from bytescart.config import get_settings
from bytescart.middleware import SecurityHeadersMiddleware


def setup_app(app: FastAPI) -> None:
    """
    Configure deployment-level middleware.

    Args:
        app: FastAPI application instance to configure
    """
    settings = get_settings()
    if settings.security_headers_enabled:
        app.add_middleware(
            SecurityHeadersMiddleware,
            enable_hsts=settings.is_production,
        )


def add_root_endpoint(app: FastAPI) -> None:
    """
    Add root endpoint to the application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str | None]:
        """Root endpoint with API information."""
        return {
            "message": settings.project_name,
            "version": __version__,
            "docs": "/docs" if settings.enable_docs else None,
        }
