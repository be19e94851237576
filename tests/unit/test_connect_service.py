"""Tests for the Stripe Connect onboarding service."""

from urllib.parse import parse_qs, urlparse

import pytest

from bytescart.api.v1.payments.services import CONNECT_FAILED, ConnectService
from bytescart.config import get_settings
from bytescart.infrastructure.cache import CacheTags
from bytescart.infrastructure.repositories import STRIPE_CONNECTED, AuditAction
from bytescart.services.audit import AuditLogger
from bytescart.utils.security import create_oauth_state, verify_oauth_state

PAYMENTS_PAGE = "http://localhost:3000/dashboard/payments"


def query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


@pytest.fixture
def service(factory, payments, tag_cache) -> ConnectService:
    return ConnectService(
        get_settings(),
        factory.get_store_repository(),
        payments,
        AuditLogger(factory.get_audit_repository()),
        tag_cache,
    )


def test_authorize_url_carries_signed_state(service, store, owner):
    # Act
    url = service.create_authorize_url(store.id, owner.id)

    # Assert
    state = query(url)["state"][0]
    assert verify_oauth_state(state) == {"store_id": store.id, "user_id": owner.id}


def test_redirect_url():
    service = ConnectService(get_settings(), None, None, None, None)

    assert service.redirect_url(success="true") == f"{PAYMENTS_PAGE}?success=true"
    assert query(service.redirect_url(error="Store not found")) == {"error": ["Store not found"]}


@pytest.mark.asyncio
@pytest.mark.parametrize("code, state", [(None, "state"), ("code", None), ("", "")])
async def test_complete_requires_code_and_state(service, code, state):
    url = await service.complete(code, state, "unknown")

    assert url.startswith(PAYMENTS_PAGE)
    assert query(url)["error"] == ["Missing authorization code or store ID"]


@pytest.mark.asyncio
async def test_complete_rejects_tampered_state(service, store, owner):
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})

    url = await service.complete("ac_123", state + "x", "unknown")

    assert query(url)["error"] == ["Invalid or expired authorization state"]


@pytest.mark.asyncio
async def test_complete_unknown_store(service, owner):
    state = create_oauth_state({"store_id": "missing", "user_id": owner.id})

    url = await service.complete("ac_123", state, "unknown")

    assert query(url)["error"] == ["Store not found"]


@pytest.mark.asyncio
async def test_complete_exchange_failure(service, factory, store, owner):
    """Test a rejected code leaves the store unconnected."""
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})

    url = await service.complete("bad-code", state, "unknown")

    assert query(url)["error"] == [CONNECT_FAILED]
    stored = await factory.get_store_repository().get_by_id(store.id)
    assert stored.stripe_connect_id is None


@pytest.mark.asyncio
async def test_complete_connects_store(service, factory, tag_cache, store, owner):
    """Test a successful exchange links the account, audits and redirects with success."""
    # Arrange
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})

    async def loader():
        return store

    await tag_cache.get_or_load("store", [CacheTags.store_by_id(store.id)], loader)

    # Act
    url = await service.complete("ac_123", state, "203.0.113.7")

    # Assert
    assert url == f"{PAYMENTS_PAGE}?success=true"
    stored = await factory.get_store_repository().get_by_id(store.id)
    assert stored.stripe_connect_id == "acct_test123"
    assert stored.stripe_connect_status == STRIPE_CONNECTED
    assert stored.stripe_connected_at is not None
    assert len(tag_cache) == 0

    records = await factory.get_audit_repository().list_recent(
        action=AuditAction.STRIPE_CONNECTED
    )
    assert len(records) == 1
    assert records[0].actor_id == owner.id
    assert records[0].store_id == store.id
    assert records[0].ip_address == "203.0.113.7"
    assert records[0].metadata == {"stripeAccountId": "acct_test123"}
