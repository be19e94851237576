"""
Health check endpoints.

Provides health check endpoints for monitoring service status.
"""

from fastapi import APIRouter, Response, status

from bytescart import __version__
from bytescart.di import InfrastructureFactoryDep
from bytescart.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    factory: InfrastructureFactoryDep, response: Response
) -> HealthResponse:
    """
    Readiness check including the database.

    Returns:
        Service status and version (503 when the database is unreachable)
    """
    if not factory.ping():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="degraded", version=__version__, message="Database unavailable"
        )
    return HealthResponse(
        status="ok", version=__version__, message="Service is healthy"
    )


@router.get("/health/public", response_model=HealthResponse)
async def public_health_check() -> HealthResponse:
    """
    Liveness check without dependencies.

    Returns:
        Service status and version
    """
    return HealthResponse(status="ok", version=__version__, message="Service is running")
