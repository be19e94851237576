"""
Custom domain verification business logic.

A domain moves Pending -> Verifying while its DNS has not propagated,
Verifying -> Securing once the A record points at the platform, and
Securing -> Live once the hosting provider has registered it (or the domain
answers over HTTPS). A Live domain that stops answering is re-verified.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from bytescart.api.v1.domains.response import DomainCheckResponse
from bytescart.core.logging import logger
from bytescart.domain.domains import DnsTargets, DomainStatus, get_status_message
from bytescart.domain.services.hosting_base import DomainProbeBase, HostingProviderBase
from bytescart.infrastructure.cache import TagCache, store_cache_tags
from bytescart.infrastructure.repositories.store_repository import Store, StoreRepository

DNS_PENDING_MESSAGE = (
    "DNS records not detected yet. This can take 15-60 minutes to propagate "
    "worldwide. Keep checking back!"
)


def _now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass
class DomainCheckOutcome:
    """Response to send plus the hosting registration to run afterwards, if any."""

    response: DomainCheckResponse
    register: bool = False
    promote_on_register: bool = False


class DomainVerificationService:
    def __init__(
        self,
        stores: StoreRepository,
        hosting: HostingProviderBase,
        probe: DomainProbeBase,
        cache: TagCache,
        dns_targets: DnsTargets,
    ) -> None:
        self.stores = stores
        self.hosting = hosting
        self.probe = probe
        self.cache = cache
        self.dns_targets = dns_targets

    async def _set_status(self, store: Store, status: DomainStatus, **fields) -> Store:
        updated = await self.stores.update(store.id, domain_status=status, **fields)
        self.cache.invalidate_tags(*store_cache_tags(updated))
        logger.info(f"Domain {store.domain} of store {store.id} is now {status.value}")
        return updated

    def _live(self, store: Store) -> DomainCheckOutcome:
        return DomainCheckOutcome(
            response=DomainCheckResponse(
                status=DomainStatus.LIVE,
                domain=store.domain,
                verified=True,
                message=get_status_message(DomainStatus.LIVE),
                certificate_generated_at=store.certificate_generated_at,
            )
        )

    def _securing(self, store: Store, promote: bool) -> DomainCheckOutcome:
        return DomainCheckOutcome(
            response=DomainCheckResponse(
                status=DomainStatus.SECURING,
                domain=store.domain,
                verified=True,
                message=get_status_message(DomainStatus.SECURING),
            ),
            register=True,
            promote_on_register=promote,
        )

    async def check(self, store: Store) -> DomainCheckOutcome:
        """
        Run one verification pass for a store with a custom domain.

        Args:
            store: Store whose ``domain`` is set

        Returns:
            Outcome carrying the response and whether to register the domain
            with the hosting provider once the response is sent
        """
        domain = store.domain
        status = DomainStatus(store.domain_status)

        if status == DomainStatus.LIVE:
            if await self.probe.is_accessible(domain):
                return self._live(store)
            logger.warning(f"Domain {domain} is marked Live but not accessible, re-checking DNS")

        if not await self.probe.points_to(domain, self.dns_targets.a_record_ip):
            if status != DomainStatus.VERIFYING:
                store = await self._set_status(store, DomainStatus.VERIFYING)
            return DomainCheckOutcome(
                response=DomainCheckResponse(
                    status=DomainStatus.VERIFYING,
                    domain=domain,
                    verified=False,
                    message=DNS_PENDING_MESSAGE,
                )
            )

        if status in (DomainStatus.PENDING, DomainStatus.VERIFYING):
            store = await self._set_status(store, DomainStatus.SECURING)
            return self._securing(store, promote=True)

        if await self.probe.is_accessible(domain):
            store = await self._set_status(
                store, DomainStatus.LIVE, certificate_generated_at=_now()
            )
            return self._live(store)

        return self._securing(store, promote=False)

    async def register(self, store_id: str, domain: str, promote: bool) -> None:
        """
        Register a domain with the hosting provider.

        Runs after the response has been sent, so failures are only logged and
        the store stays Securing until the next check.

        Args:
            store_id: Store owning the domain
            domain: Custom domain to register
            promote: Mark the store Live when registration succeeds
        """
        try:
            result = await self.hosting.add_domain(domain)
            if not result.success:
                logger.error(f"Failed to register domain {domain} with hosting: {result.error}")
                return

            logger.info(f"Registered domain {domain} with hosting")
            if promote:
                updated = await self.stores.update(
                    store_id,
                    domain_status=DomainStatus.LIVE,
                    certificate_generated_at=_now(),
                )
                self.cache.invalidate_tags(*store_cache_tags(updated))
        except Exception as e:
            logger.exception(f"Error registering domain {domain}: {e}")
