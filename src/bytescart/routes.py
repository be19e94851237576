"""
Routes registration for the FastAPI application.

Centralizes all router registrations for clean application setup.
"""

from fastapi import FastAPI

from bytescart.api.v1.actions.router import router as actions_router
from bytescart.api.v1.auth.router import router as auth_router
from bytescart.api.v1.domains.router import router as domains_router
from bytescart.api.v1.health.router import router as health_router
from bytescart.api.v1.payments.router import router as payments_router
from bytescart.api.v1.skeletons.router import router as skeletons_router
from bytescart.api.v1.stores.router import router as stores_router
from bytescart.api.v1.stripe.router import router as stripe_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, public)
    app.include_router(health_router)

    # Route handlers used by the dashboard and storefront
    app.include_router(auth_router)
    app.include_router(stores_router)
    app.include_router(stripe_router)
    app.include_router(payments_router)
    app.include_router(domains_router)

    # Server actions (authenticated dashboard mutations)
    app.include_router(actions_router)

    # Static loading placeholders
    app.include_router(skeletons_router)
