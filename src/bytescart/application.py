"""
Builds the ByteScart FastAPI app: exception handlers, trace id and CORS
middleware, routers and the OpenAPI document.
"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from bytescart import __version__
from bytescart.config import get_settings
from bytescart.core.logging import logger
from bytescart.exception_handlers import (
    RouteError,
    general_exception_handler,
    http_exception_handler,
    route_error_handler,
    validation_exception_handler,
)
from bytescart.lifespan import lifespan
from bytescart.middleware import TraceIDMiddleware
from bytescart.openapi import configure_openapi
from bytescart.routes import register_routes


def create_app() -> FastAPI:
    """Return a new application; security headers are added later by ``setup_app``."""
    settings = get_settings()

    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None

    app = FastAPI(
        title=settings.project_name,
        description=settings.project_description,
        version=__version__,
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    # {"error": ...} for route failures, RFC 7807 for everything else
    app.add_exception_handler(RouteError, route_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(TraceIDMiddleware)

    # CORS configuration (credentials allowed for the auth cookie)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=settings.get_cors_allowed_methods(),
        allow_headers=settings.get_cors_allowed_headers(),
        expose_headers=["X-Trace-ID", "Retry-After"],
    )

    register_routes(app)

    configure_openapi(app)

    logger.info(f"ByteScart API ready (v{__version__}, {settings.environment})")
    logger.info(f"CORS origins: {settings.get_allowed_origins()}")

    return app
