"""Tests for dependency injection container."""

import pytest
from starlette.requests import Request

from bytescart.config import get_settings
from bytescart.di import (
    get_access_token,
    get_audit_logger,
    get_auth_provider,
    get_current_user,
    get_domain_probe,
    get_hosting_provider,
    get_infrastructure_factory,
    get_payment_processor,
    get_rate_limiter,
    get_store_repository,
    get_stripe_account_service,
    get_tag_cache,
)
from bytescart.infrastructure import InfrastructureFactory
from bytescart.infrastructure.providers.dns import NetworkDomainProbe
from bytescart.infrastructure.providers.render import RenderHostingProvider
from bytescart.infrastructure.providers.stripe import StripePaymentProcessor
from bytescart.infrastructure.providers.supabase import SupabaseAuthProvider
from bytescart.services.audit import AuditLogger
from bytescart.services.stripe_account import StripeAccountService


def make_request(headers: dict[str, str] | None = None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


def test_get_infrastructure_factory():
    """Test getting infrastructure factory with settings."""
    settings = get_settings()
    factory = get_infrastructure_factory(settings)

    assert factory is not None
    assert isinstance(factory, InfrastructureFactory)


def test_get_store_repository_and_audit_logger(factory):
    store_repo = get_store_repository(factory)
    audit = get_audit_logger(factory.get_audit_repository())

    assert store_repo is not None
    assert isinstance(audit, AuditLogger)


def test_provider_factories():
    """Test each provider getter builds the production client."""
    settings = get_settings()

    assert isinstance(get_auth_provider(settings), SupabaseAuthProvider)
    assert isinstance(get_payment_processor(settings), StripePaymentProcessor)
    assert isinstance(get_hosting_provider(settings), RenderHostingProvider)
    assert isinstance(get_domain_probe(settings), NetworkDomainProbe)


def test_get_stripe_account_service(factory, payments):
    service = get_stripe_account_service(factory.get_store_repository(), payments)

    assert isinstance(service, StripeAccountService)


def test_process_wide_singletons():
    assert get_tag_cache() is get_tag_cache()
    assert get_rate_limiter() is get_rate_limiter()


# ===========================
# Access token extraction
# ===========================


def test_get_access_token_from_bearer_header():
    request = make_request({"Authorization": "Bearer header-token"})

    assert get_access_token(request, get_settings()) == "header-token"


def test_get_access_token_header_wins_over_cookie():
    """Test the Authorization header takes precedence over the session cookie."""
    request = make_request(
        {"Authorization": "Bearer header-token", "Cookie": "sb-access-token=cookie-token"}
    )

    assert get_access_token(request, get_settings()) == "header-token"


def test_get_access_token_from_cookie():
    request = make_request({"Cookie": "sb-access-token=cookie-token"})

    assert get_access_token(request, get_settings()) == "cookie-token"


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Basic dXNlcjpwYXNz"}, {"Authorization": "Bearer   "}],
)
def test_get_access_token_missing(headers):
    assert get_access_token(make_request(headers), get_settings()) is None


# ===========================
# Current user
# ===========================


@pytest.mark.asyncio
async def test_get_current_user(auth_provider, owner):
    assert await get_current_user("owner-token", auth_provider) == owner


@pytest.mark.asyncio
async def test_get_current_user_anonymous_or_rejected(auth_provider):
    assert await get_current_user(None, auth_provider) is None
    assert await get_current_user("forged-token", auth_provider) is None
