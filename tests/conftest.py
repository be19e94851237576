"""Global pytest configuration and fixtures for all tests."""

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient

from bytescart.application import create_app
from bytescart.config import get_settings
from bytescart.di import (
    get_auth_provider,
    get_domain_probe,
    get_hosting_provider,
    get_infrastructure_factory,
    get_payment_processor,
    get_rate_limiter,
    get_tag_cache,
)
from bytescart.domain.domains import DomainStatus
from bytescart.domain.services.auth_base import AuthProviderBase, AuthUser
from bytescart.domain.services.hosting_base import (
    DomainProbeBase,
    HostingProviderBase,
    HostingResult,
)
from bytescart.domain.services.payment_base import (
    CheckoutLineItem,
    CheckoutSession,
    ConnectedAccountGrant,
    PaymentProcessorBase,
    PaymentProviderError,
)
from bytescart.infrastructure import InfrastructureFactory
from bytescart.infrastructure.cache import TagCache
from bytescart.infrastructure.implementations.sql import SessionProvider, create_db_engine
from bytescart.infrastructure.implementations.sql.models import StoreModel
from bytescart.infrastructure.implementations.sql.store_repository import to_store
from bytescart.infrastructure.repositories import Store
from bytescart.utils.rate_limit import RateLimiter

OWNER_TOKEN = "owner-token"
OTHER_TOKEN = "other-token"


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    This fixture runs automatically before any tests and provides
    dummy provider credentials so tests don't fail due to missing configuration.

    These are NOT real credentials - just placeholders for testing.
    """
    # Store original values to restore after tests
    original_env = {}

    test_env_vars = {
        # Server configuration
        "SECRET_KEY": "test-secret-key-minimum-32-characters-long-for-testing",
        "APP_URL": "http://localhost:3000",
        "ENABLE_DOCS": "false",  # Keep docs disabled in tests
        "ENVIRONMENT": "development",
        # Persistence (each test gets its own database through the factory fixture)
        "DATABASE_URL": "sqlite://",
        "INITIALIZE_DATABASE": "false",
        # Auth provider (dummy values for testing)
        "SUPABASE_URL": "https://test-project.supabase.co",
        "SUPABASE_ANON_KEY": "test-anon-key",
        # Stripe Connect (dummy values for testing)
        "STRIPE_SECRET_KEY": "sk_test_dummy",
        "STRIPE_CONNECT_CLIENT_ID": "ca_test_dummy",
        # Render (dummy values for testing)
        "RENDER_API_KEY": "rnd_test_dummy",
        "RENDER_SERVICE_ID": "srv-test",
        "RENDER_IP_ADDRESS": "216.24.57.1",
    }

    # Set test environment variables
    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value
    get_settings.cache_clear()

    yield

    # Restore original environment after all tests
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value
    get_settings.cache_clear()


# ============================================================================
# Test doubles for the external providers
# ============================================================================


class FakeAuthProvider(AuthProviderBase):
    """Resolves tokens from a fixed table and records sign-outs."""

    def __init__(self, users: dict[str, AuthUser]):
        self.users = users
        self.signed_out: list[str] = []

    async def get_user(self, access_token: str) -> AuthUser | None:
        return self.users.get(access_token)

    async def sign_out(self, access_token: str) -> bool:
        self.signed_out.append(access_token)
        return access_token in self.users


class FakeHostingProvider(HostingProviderBase):
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.added: list[str] = []
        self.removed: list[str] = []

    async def add_domain(self, domain: str) -> HostingResult:
        self.added.append(domain)
        if not self.succeed:
            return HostingResult(success=False, error="Failed to add domain")
        return HostingResult(success=True, data={"name": domain})

    async def get_domain(self, domain: str) -> HostingResult:
        return HostingResult(success=domain in self.added, data={"name": domain})

    async def remove_domain(self, domain: str) -> HostingResult:
        self.removed.append(domain)
        return HostingResult(success=True)


class FakeDomainProbe(DomainProbeBase):
    """DNS and HTTPS answers set by the test."""

    def __init__(self, points: bool = False, accessible: bool = False):
        self.points = points
        self.accessible = accessible

    async def points_to(self, domain: str, ip_address: str) -> bool:
        return self.points

    async def is_accessible(self, domain: str) -> bool:
        return self.accessible


class FakePaymentProcessor(PaymentProcessorBase):
    def __init__(self):
        self.fail = False
        self.grant_account_id = "acct_test123"
        self.deauthorized: list[str] = []
        self.checkouts: list[dict[str, Any]] = []
        self.sessions: dict[str, dict[str, Any]] = {}

    def _check(self) -> None:
        if self.fail:
            raise PaymentProviderError("Stripe is unavailable", status_code=503)

    async def get_account(self, account_id: str) -> dict[str, Any]:
        self._check()
        return {
            "id": account_id,
            "email": "owner@example.com",
            "charges_enabled": True,
            "payouts_enabled": False,
        }

    async def get_balance(self, account_id: str) -> dict[str, Any]:
        self._check()
        return {
            "available": [{"amount": 1250, "currency": "usd"}],
            "pending": [{"amount": 300, "currency": "usd"}],
        }

    async def list_payouts(self, account_id: str, limit: int = 10) -> list[dict[str, Any]]:
        self._check()
        return [
            {
                "id": "po_1",
                "amount": 5000,
                "currency": "usd",
                "status": "paid",
                "arrival_date": 1700000000,
            }
        ]

    def get_connect_authorize_url(self, state: str, redirect_uri: str) -> str:
        self._check()
        return f"https://connect.stripe.test/oauth/authorize?state={state}"

    async def exchange_connect_code(self, code: str) -> ConnectedAccountGrant:
        self._check()
        if code == "bad-code":
            raise PaymentProviderError("Invalid authorization code")
        return ConnectedAccountGrant(account_id=self.grant_account_id)

    async def deauthorize(self, account_id: str) -> bool:
        self.deauthorized.append(account_id)
        return not self.fail

    async def create_checkout_session(
        self,
        account_id: str,
        line_items: list[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        currency: str = "usd",
        customer_email: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> CheckoutSession:
        self._check()
        session_id = f"cs_test_{len(self.checkouts) + 1}"
        self.checkouts.append(
            {
                "account_id": account_id,
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "currency": currency,
                "customer_email": customer_email,
                "metadata": metadata or {},
            }
        )
        return CheckoutSession(id=session_id, url=f"https://checkout.stripe.test/{session_id}")

    async def retrieve_checkout_session(
        self, account_id: str, session_id: str
    ) -> dict[str, Any]:
        self._check()
        if session_id not in self.sessions:
            raise PaymentProviderError(f"No such checkout session: '{session_id}'", 404)
        return self.sessions[session_id]


# ============================================================================
# Persistence fixtures
# ============================================================================


@pytest.fixture
def factory(tmp_path) -> InfrastructureFactory:
    """Infrastructure factory backed by a fresh SQLite file."""
    url = f"sqlite:///{tmp_path / 'bytescart-test.db'}"
    factory = InfrastructureFactory(url, engine=create_db_engine(url))
    factory.init_schema()
    yield factory
    factory.engine.dispose()


@pytest.fixture
def owner() -> AuthUser:
    return AuthUser(id="user-owner", email="owner@example.com")


@pytest.fixture
def other_user() -> AuthUser:
    return AuthUser(id="user-other", email="other@example.com")


@pytest.fixture
def store(factory, owner) -> Store:
    """Store owned by ``owner``."""
    with SessionProvider(factory.engine).session() as session:
        row = StoreModel(
            owner_id=owner.id,
            store_name="Test Shop",
            subdomain_slug="test-shop",
            theme_id="minimal",
        )
        session.add(row)
        session.commit()
        return to_store(row)


@pytest.fixture
def update_store(factory):
    """Set store columns directly, without going through the async repository."""

    def update(store_id: str, **fields: Any) -> Store:
        with SessionProvider(factory.engine).session() as session:
            row = session.get(StoreModel, store_id)
            for name, value in fields.items():
                setattr(row, name, value.value if isinstance(value, DomainStatus) else value)
            session.commit()
            return to_store(row)

    return update


# ============================================================================
# Application fixtures
# ============================================================================


@pytest.fixture
def auth_provider(owner, other_user) -> FakeAuthProvider:
    return FakeAuthProvider({OWNER_TOKEN: owner, OTHER_TOKEN: other_user})


@pytest.fixture
def hosting() -> FakeHostingProvider:
    return FakeHostingProvider()


@pytest.fixture
def probe() -> FakeDomainProbe:
    return FakeDomainProbe()


@pytest.fixture
def payments() -> FakePaymentProcessor:
    return FakePaymentProcessor()


@pytest.fixture
def tag_cache() -> TagCache:
    return TagCache(ttl_seconds=60)


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter()


@pytest.fixture
def app(factory, auth_provider, hosting, probe, payments, tag_cache, rate_limiter):
    """Application wired to the test database and fake providers."""
    app = create_app()
    app.dependency_overrides[get_infrastructure_factory] = lambda: factory
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_hosting_provider] = lambda: hosting
    app.dependency_overrides[get_domain_probe] = lambda: probe
    app.dependency_overrides[get_payment_processor] = lambda: payments
    app.dependency_overrides[get_tag_cache] = lambda: tag_cache
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {OWNER_TOKEN}"}


@pytest.fixture
def other_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}
