"""Tests for the DNS and HTTPS reachability probe."""

import socket
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from bytescart.infrastructure.providers.dns import NetworkDomainProbe


def addrinfo(*addresses: str) -> list[tuple]:
    return [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0)) for address in addresses
    ]


@pytest.mark.asyncio
async def test_resolve_ipv4_deduplicates_and_sorts():
    # Arrange
    probe = NetworkDomainProbe()
    lookup = AsyncMock(return_value=addrinfo("216.24.57.1", "10.0.0.1", "216.24.57.1"))

    # Act
    with patch("asyncio.base_events.BaseEventLoop.getaddrinfo", lookup):
        addresses = await probe.resolve_ipv4("shop.example.com")

    # Assert
    assert addresses == ["10.0.0.1", "216.24.57.1"]


@pytest.mark.asyncio
async def test_resolve_ipv4_failure_returns_empty():
    probe = NetworkDomainProbe()
    lookup = AsyncMock(side_effect=socket.gaierror(-2, "Name or service not known"))

    with patch("asyncio.base_events.BaseEventLoop.getaddrinfo", lookup):
        assert await probe.resolve_ipv4("nowhere.invalid") == []


@pytest.mark.asyncio
async def test_points_to():
    """Test the A record check matches any resolved address."""
    probe = NetworkDomainProbe()

    with patch.object(
        NetworkDomainProbe, "resolve_ipv4", AsyncMock(return_value=["1.2.3.4", "216.24.57.1"])
    ):
        assert await probe.points_to("shop.example.com", "216.24.57.1") is True
        assert await probe.points_to("shop.example.com", "9.9.9.9") is False


@pytest.mark.asyncio
async def test_points_to_unresolvable():
    probe = NetworkDomainProbe()

    with patch.object(NetworkDomainProbe, "resolve_ipv4", AsyncMock(return_value=[])):
        assert await probe.points_to("shop.example.com", "216.24.57.1") is False


@respx.mock
@pytest.mark.asyncio
async def test_is_accessible_on_success_status():
    respx.head("https://shop.example.com").mock(return_value=httpx.Response(200))

    assert await NetworkDomainProbe().is_accessible("shop.example.com") is True


@respx.mock
@pytest.mark.asyncio
async def test_is_not_accessible_on_error_status():
    respx.head("https://shop.example.com").mock(return_value=httpx.Response(502))

    assert await NetworkDomainProbe().is_accessible("shop.example.com") is False


@respx.mock
@pytest.mark.asyncio
async def test_is_not_accessible_on_tls_or_network_error():
    """Test a certificate or connection failure counts as not accessible."""
    respx.head("https://shop.example.com").mock(
        side_effect=httpx.ConnectError("certificate verify failed")
    )

    assert await NetworkDomainProbe().is_accessible("shop.example.com") is False
