"""
Application lifecycle management.

Handles startup and shutdown events for the FastAPI application.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from bytescart.config import get_settings
from bytescart.infrastructure.factory import InfrastructureFactory, get_engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Creates missing tables on startup when ``initialize_database`` is set and
    disposes of the connection pools on shutdown.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()
    logger.info(" Starting ByteScart backend...")
    logger.info(f"Application version: {app.version}")

    if settings.initialize_database:
        InfrastructureFactory.from_settings(settings).init_schema()
        logger.info("Database schema ready")

    yield

    logger.info(" Shutting down ByteScart backend...")
    get_engine(settings.database_url).dispose()
    get_engine.cache_clear()
