"""Tests for the sign-out endpoint."""

import pytest

from bytescart.infrastructure.repositories import AuditAction


def test_sign_out_get_not_allowed(client):
    """Test GET never signs a user out."""
    response = client.get("/api/auth/signout")

    assert response.status_code == 405
    assert response.headers["Allow"] == "POST"
    assert response.json() == {"error": "Method not allowed"}


def test_sign_out_anonymous_redirects_to_login(client, auth_provider):
    response = client.post("/api/auth/signout")

    assert response.status_code == 303
    assert response.headers["Location"] == "http://localhost:3000/login"
    assert auth_provider.signed_out == []


@pytest.mark.asyncio
async def test_sign_out_authenticated(client, factory, auth_provider, auth_headers, owner):
    """Test sign-out revokes the session, clears the cookie and writes one audit entry."""
    # Act
    response = client.post("/api/auth/signout", headers=auth_headers)

    # Assert
    assert response.status_code == 303
    assert response.headers["Location"] == "http://localhost:3000/login"
    assert 'sb-access-token=""' in response.headers["set-cookie"]
    assert auth_provider.signed_out == ["owner-token"]

    records = await factory.get_audit_repository().list_recent(action=AuditAction.SIGN_OUT)
    assert len(records) == 1
    assert records[0].actor_id == owner.id
    assert records[0].resource_type == "Auth"
    assert records[0].ip_address == "unknown"


@pytest.mark.asyncio
async def test_sign_out_with_cookie(client, factory, auth_provider):
    client.cookies.set("sb-access-token", "owner-token")

    response = client.post("/api/auth/signout")

    assert response.status_code == 303
    assert auth_provider.signed_out == ["owner-token"]
    assert len(await factory.get_audit_repository().list_recent()) == 1


@pytest.mark.asyncio
async def test_sign_out_rejected_token_still_redirects(client, factory, auth_provider):
    """Test an unknown token is revoked best-effort without an audit entry."""
    response = client.post("/api/auth/signout", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 303
    assert auth_provider.signed_out == ["stale"]
    assert await factory.get_audit_repository().list_recent() == []
