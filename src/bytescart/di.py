"""
Dependency injection container for the ByteScart backend.

This module provides centralized dependency injection using FastAPI's Depends
with typing.Annotated for clean type hints throughout the application.
Tests replace any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from bytescart.config import Settings, get_settings
from bytescart.domain.services.auth_base import AuthProviderBase, AuthUser
from bytescart.domain.services.hosting_base import DomainProbeBase, HostingProviderBase
from bytescart.domain.services.payment_base import PaymentProcessorBase
from bytescart.infrastructure import InfrastructureFactory
from bytescart.infrastructure.cache import TagCache
from bytescart.infrastructure.providers.dns import NetworkDomainProbe
from bytescart.infrastructure.providers.render import RenderHostingProvider
from bytescart.infrastructure.providers.stripe import StripePaymentProcessor
from bytescart.infrastructure.providers.supabase import SupabaseAuthProvider
from bytescart.infrastructure.repositories import (
    AuditRepository,
    OrderRepository,
    ProductRepository,
    ShippingLocationRepository,
    StoreRepository,
)
from bytescart.services.audit import AuditLogger
from bytescart.services.stripe_account import StripeAccountService
from bytescart.utils.rate_limit import RateLimiter

# ============================================================================
# Settings Dependencies
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


# ============================================================================
# Infrastructure Dependencies
# ============================================================================


def get_infrastructure_factory(
    settings: SettingsDep,
) -> InfrastructureFactory:
    """
    Get infrastructure factory from settings.

    Args:
        settings: Application settings (injected)

    Returns:
        Configured infrastructure factory
    """
    return InfrastructureFactory.from_settings(settings)


InfrastructureFactoryDep = Annotated[
    InfrastructureFactory, Depends(get_infrastructure_factory)
]
"""Injected InfrastructureFactory instance."""


def get_store_repository(factory: InfrastructureFactoryDep) -> StoreRepository:
    return factory.get_store_repository()


def get_shipping_location_repository(
    factory: InfrastructureFactoryDep,
) -> ShippingLocationRepository:
    return factory.get_shipping_location_repository()


def get_product_repository(factory: InfrastructureFactoryDep) -> ProductRepository:
    return factory.get_product_repository()


def get_order_repository(factory: InfrastructureFactoryDep) -> OrderRepository:
    return factory.get_order_repository()


def get_audit_repository(factory: InfrastructureFactoryDep) -> AuditRepository:
    return factory.get_audit_repository()


StoreRepositoryDep = Annotated[StoreRepository, Depends(get_store_repository)]
ShippingLocationRepositoryDep = Annotated[
    ShippingLocationRepository, Depends(get_shipping_location_repository)
]
ProductRepositoryDep = Annotated[ProductRepository, Depends(get_product_repository)]
OrderRepositoryDep = Annotated[OrderRepository, Depends(get_order_repository)]
AuditRepositoryDep = Annotated[AuditRepository, Depends(get_audit_repository)]


@lru_cache
def get_tag_cache() -> TagCache:
    """Process-wide tag cache."""
    return TagCache(ttl_seconds=get_settings().cache_ttl_seconds)


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide rate limiter."""
    return RateLimiter()


TagCacheDep = Annotated[TagCache, Depends(get_tag_cache)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]


# ============================================================================
# Audit Dependencies
# ============================================================================


def get_audit_logger(repository: AuditRepositoryDep) -> AuditLogger:
    return AuditLogger(repository)


AuditLoggerDep = Annotated[AuditLogger, Depends(get_audit_logger)]
"""Injected AuditLogger (best-effort audit trail)."""


# ============================================================================
# Provider Dependencies
# ============================================================================


def get_auth_provider(settings: SettingsDep) -> AuthProviderBase:
    """
    Get auth provider client.

    Args:
        settings: Application settings (injected)

    Returns:
        Supabase auth client
    """
    return SupabaseAuthProvider(
        base_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        timeout=settings.auth_timeout_seconds,
    )


AuthProviderDep = Annotated[AuthProviderBase, Depends(get_auth_provider)]


def get_payment_processor(settings: SettingsDep) -> PaymentProcessorBase:
    """
    Get payment processor client.

    Args:
        settings: Application settings (injected)

    Returns:
        Stripe client
    """
    return StripePaymentProcessor(
        secret_key=settings.stripe_secret_key,
        connect_client_id=settings.stripe_connect_client_id,
        api_base=settings.stripe_api_base,
        connect_base=settings.stripe_connect_base,
        timeout=settings.stripe_timeout_seconds,
    )


PaymentProcessorDep = Annotated[PaymentProcessorBase, Depends(get_payment_processor)]


def get_hosting_provider(settings: SettingsDep) -> HostingProviderBase:
    return RenderHostingProvider(
        api_key=settings.render_api_key,
        service_id=settings.render_service_id,
        api_base=settings.render_api_base,
    )


HostingProviderDep = Annotated[HostingProviderBase, Depends(get_hosting_provider)]


def get_domain_probe(settings: SettingsDep) -> DomainProbeBase:
    return NetworkDomainProbe(timeout=settings.domain_access_timeout_seconds)


DomainProbeDep = Annotated[DomainProbeBase, Depends(get_domain_probe)]


def get_stripe_account_service(
    stores: StoreRepositoryDep,
    payments: PaymentProcessorDep,
) -> StripeAccountService:
    return StripeAccountService(stores, payments)


StripeAccountServiceDep = Annotated[
    StripeAccountService, Depends(get_stripe_account_service)
]


# ============================================================================
# Authentication Dependencies
# ============================================================================


def get_access_token(request: Request, settings: SettingsDep) -> str | None:
    """
    Extract the auth provider access token from a request.

    The ``Authorization: Bearer`` header wins over the session cookie.
    """
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(settings.auth_cookie_name) or None


AccessTokenDep = Annotated[str | None, Depends(get_access_token)]


async def get_current_user(
    token: AccessTokenDep,
    auth: AuthProviderDep,
) -> AuthUser | None:
    """
    Resolve the authenticated user.

    Returns:
        The user, or None for anonymous requests and rejected tokens
    """
    if not token:
        return None
    return await auth.get_user(token)


CurrentUserDep = Annotated[AuthUser | None, Depends(get_current_user)]
"""Injected current user (None when not authenticated)."""
