"""Tests for the Stripe Connect onboarding endpoints."""

from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from bytescart.infrastructure.implementations.sql.store_repository import SqlStoreRepository
from bytescart.infrastructure.repositories import STRIPE_CONNECTED
from bytescart.utils.security import create_oauth_state, verify_oauth_state

PAYMENTS_PAGE = "http://localhost:3000/dashboard/payments"


def query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


# ===========================
# Initiate
# ===========================


def test_initiate_unauthenticated(client, store):
    """Test authentication is checked before the body."""
    response = client.post("/api/payments/connect/initiate", json={"storeId": store.id})

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


def test_initiate_requires_store_id(client, auth_headers):
    response = client.post("/api/payments/connect/initiate", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Store ID is required"}


def test_initiate_other_users_store(client, store, other_headers):
    response = client.post(
        "/api/payments/connect/initiate", json={"storeId": store.id}, headers=other_headers
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Store not found or unauthorized"}


def test_initiate(client, store, owner, auth_headers):
    # Act
    response = client.post(
        "/api/payments/connect/initiate", json={"storeId": store.id}, headers=auth_headers
    )

    # Assert
    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("https://connect.stripe.test/oauth/authorize")
    assert verify_oauth_state(query(url)["state"][0]) == {
        "store_id": store.id,
        "user_id": owner.id,
    }


def test_initiate_provider_failure(client, store, payments, auth_headers):
    payments.fail = True

    response = client.post(
        "/api/payments/connect/initiate", json={"storeId": store.id}, headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to initiate Stripe Connect"}


# ===========================
# Callback
# ===========================


def test_callback_provider_error(client):
    """Test an error reported by Stripe is forwarded to the dashboard."""
    response = client.get(
        "/api/payments/connect/callback",
        params={"error": "access_denied", "error_description": "The user denied access"},
    )

    assert response.status_code == 307
    location = response.headers["Location"]
    assert location.startswith(PAYMENTS_PAGE)
    assert query(location) == {"error": ["The user denied access"]}


def test_callback_bad_state(client):
    response = client.get(
        "/api/payments/connect/callback", params={"code": "ac_123", "state": "forged"}
    )

    assert query(response.headers["Location"]) == {
        "error": ["Invalid or expired authorization state"]
    }


def test_callback_missing_code(client):
    response = client.get("/api/payments/connect/callback")

    assert query(response.headers["Location"]) == {
        "error": ["Missing authorization code or store ID"]
    }


@pytest.mark.asyncio
async def test_callback_success(client, factory, store, owner):
    """Test the round trip from initiate state to a connected store."""
    # Arrange
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})

    # Act
    response = client.get(
        "/api/payments/connect/callback", params={"code": "ac_123", "state": state}
    )

    # Assert
    assert response.status_code == 307
    assert response.headers["Location"] == f"{PAYMENTS_PAGE}?success=true"

    stored = await factory.get_store_repository().get_by_id(store.id)
    assert stored.stripe_connect_id == "acct_test123"
    assert stored.stripe_connect_status == STRIPE_CONNECTED


@pytest.mark.asyncio
async def test_callback_exchange_failure(client, factory, store, owner):
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})

    response = client.get(
        "/api/payments/connect/callback", params={"code": "bad-code", "state": state}
    )

    assert query(response.headers["Location"]) == {
        "error": ["Failed to connect Stripe account. Please try again."]
    }
    assert (await factory.get_store_repository().get_by_id(store.id)).stripe_connect_id is None


def test_callback_store_update_failure_redirects(client, store, owner):
    """Test a database failure after the exchange still ends on the dashboard."""
    # Arrange
    state = create_oauth_state({"store_id": store.id, "user_id": owner.id})
    failing_update = AsyncMock(side_effect=RuntimeError("database is locked"))

    # Act
    with patch.object(SqlStoreRepository, "update", failing_update):
        response = client.get(
            "/api/payments/connect/callback", params={"code": "ac_123", "state": state}
        )

    # Assert
    assert response.status_code == 307
    location = response.headers["Location"]
    assert location.startswith(PAYMENTS_PAGE)
    assert query(location) == {
        "error": ["Failed to connect Stripe account. Please try again."]
    }
    failing_update.assert_awaited_once()
