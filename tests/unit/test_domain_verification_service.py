"""Tests for the custom domain verification state machine."""

from datetime import datetime

import pytest

from bytescart.api.v1.domains.services import DNS_PENDING_MESSAGE, DomainVerificationService
from bytescart.domain.domains import DnsTargets, DomainStatus, get_status_message
from bytescart.infrastructure.cache import CacheTags

DOMAIN = "shop.example.com"
TARGETS = DnsTargets(a_record_ip="216.24.57.1", cname_target="srv-test.onrender.com")


@pytest.fixture
def stores(factory):
    return factory.get_store_repository()


@pytest.fixture
def service(stores, hosting, probe, tag_cache):
    return DomainVerificationService(stores, hosting, probe, tag_cache, TARGETS)


@pytest.fixture
def with_domain(store, update_store):
    """Return a helper that puts the test store's domain in a given status."""

    def set_status(status: DomainStatus, certificate_generated_at: datetime | None = None):
        return update_store(
            store.id,
            domain=DOMAIN,
            domain_status=status,
            certificate_generated_at=certificate_generated_at,
        )

    return set_status


@pytest.mark.asyncio
async def test_pending_without_dns_moves_to_verifying(service, stores, with_domain):
    """Test a domain whose DNS has not propagated is Verifying."""
    # Arrange
    store = with_domain(DomainStatus.PENDING)

    # Act
    outcome = await service.check(store)

    # Assert
    assert outcome.response.status == DomainStatus.VERIFYING
    assert outcome.response.verified is False
    assert outcome.response.message == DNS_PENDING_MESSAGE
    assert outcome.register is False
    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.VERIFYING


@pytest.mark.asyncio
async def test_dns_verified_moves_to_securing_and_schedules_registration(
    service, stores, probe, with_domain
):
    # Arrange
    probe.points = True
    store = with_domain(DomainStatus.VERIFYING)

    # Act
    outcome = await service.check(store)

    # Assert
    assert outcome.response.status == DomainStatus.SECURING
    assert outcome.response.verified is True
    assert outcome.response.message == get_status_message(DomainStatus.SECURING)
    assert outcome.register is True
    assert outcome.promote_on_register is True
    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.SECURING


@pytest.mark.asyncio
async def test_securing_goes_live_once_accessible(service, stores, probe, with_domain):
    probe.points = True
    probe.accessible = True
    store = with_domain(DomainStatus.SECURING)

    outcome = await service.check(store)

    assert outcome.response.status == DomainStatus.LIVE
    assert outcome.response.certificate_generated_at is not None
    assert outcome.register is False
    stored = await stores.get_by_id(store.id)
    assert stored.domain_status == DomainStatus.LIVE
    assert stored.certificate_generated_at is not None


@pytest.mark.asyncio
async def test_securing_not_accessible_retries_registration(service, probe, with_domain):
    """Test a Securing domain that is not served yet is re-registered without promotion."""
    probe.points = True
    store = with_domain(DomainStatus.SECURING)

    outcome = await service.check(store)

    assert outcome.response.status == DomainStatus.SECURING
    assert outcome.register is True
    assert outcome.promote_on_register is False


@pytest.mark.asyncio
async def test_live_and_accessible_is_unchanged(service, stores, probe, with_domain):
    probe.accessible = True
    issued = datetime(2025, 5, 1, 8, 0)
    store = with_domain(DomainStatus.LIVE, certificate_generated_at=issued)

    outcome = await service.check(store)

    assert outcome.response.status == DomainStatus.LIVE
    assert outcome.response.verified is True
    assert outcome.response.certificate_generated_at == issued
    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.LIVE


@pytest.mark.asyncio
async def test_live_but_unreachable_is_reverified(service, stores, with_domain):
    """Test a Live domain that lost its DNS goes back to Verifying."""
    store = with_domain(DomainStatus.LIVE)

    outcome = await service.check(store)

    assert outcome.response.status == DomainStatus.VERIFYING
    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.VERIFYING


@pytest.mark.asyncio
async def test_status_change_invalidates_store_cache(service, tag_cache, probe, with_domain):
    # Arrange
    store = with_domain(DomainStatus.PENDING)

    async def loader():
        return "cached"

    await tag_cache.get_or_load("lookup", [CacheTags.domain(DOMAIN)], loader)
    assert len(tag_cache) == 1

    # Act
    await service.check(store)

    # Assert
    assert len(tag_cache) == 0


@pytest.mark.asyncio
async def test_register_promotes_to_live(service, stores, hosting, with_domain):
    store = with_domain(DomainStatus.SECURING)

    await service.register(store.id, DOMAIN, promote=True)

    assert hosting.added == [DOMAIN]
    stored = await stores.get_by_id(store.id)
    assert stored.domain_status == DomainStatus.LIVE
    assert stored.certificate_generated_at is not None


@pytest.mark.asyncio
async def test_register_without_promotion_keeps_status(service, stores, hosting, with_domain):
    store = with_domain(DomainStatus.SECURING)

    await service.register(store.id, DOMAIN, promote=False)

    assert hosting.added == [DOMAIN]
    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.SECURING


@pytest.mark.asyncio
async def test_register_failure_keeps_securing(service, stores, hosting, with_domain):
    """Test a hosting rejection leaves the store Securing for the next check."""
    hosting.succeed = False
    store = with_domain(DomainStatus.SECURING)

    await service.register(store.id, DOMAIN, promote=True)

    assert (await stores.get_by_id(store.id)).domain_status == DomainStatus.SECURING


@pytest.mark.asyncio
async def test_register_swallows_unexpected_errors(service, hosting, with_domain):
    store = with_domain(DomainStatus.SECURING)

    async def explode(domain):
        raise RuntimeError("connection reset")

    hosting.add_domain = explode

    await service.register(store.id, DOMAIN, promote=True)
