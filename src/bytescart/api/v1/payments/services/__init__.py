"""Stripe Connect onboarding business logic."""

from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

from bytescart.config import Settings
from bytescart.core.logging import logger
from bytescart.domain.services.payment_base import (
    PaymentProcessorBase,
    PaymentProviderError,
)
from bytescart.infrastructure.cache import TagCache, store_cache_tags
from bytescart.infrastructure.repositories.audit_repository import AuditAction
from bytescart.infrastructure.repositories.store_repository import (
    STRIPE_CONNECTED,
    StoreRepository,
)
from bytescart.services.audit import AuditLogEntry, AuditLogger
from bytescart.utils.security import create_oauth_state, verify_oauth_state

CONNECT_FAILED = "Failed to connect Stripe account. Please try again."


class ConnectService:
    """Runs the Connect OAuth flow that links a Stripe account to a store."""

    def __init__(
        self,
        settings: Settings,
        stores: StoreRepository,
        payments: PaymentProcessorBase,
        audit: AuditLogger,
        cache: TagCache,
    ) -> None:
        self.settings = settings
        self.stores = stores
        self.payments = payments
        self.audit = audit
        self.cache = cache

    def create_authorize_url(self, store_id: str, user_id: str) -> str:
        """
        Build the Connect authorization URL for a store.

        The state is signed and time-limited so the callback can trust the
        store id it carries.

        Raises:
            PaymentProviderError: If Connect is not configured
        """
        state = create_oauth_state({"store_id": store_id, "user_id": user_id})
        return self.payments.get_connect_authorize_url(
            state=state, redirect_uri=self.settings.get_connect_callback_url()
        )

    def redirect_url(self, **params: str) -> str:
        return f"{self.settings.get_payments_redirect_url()}?{urlencode(params)}"

    async def complete(
        self,
        code: str | None,
        state: str | None,
        ip_address: str,
    ) -> str:
        """
        Finish onboarding after Stripe redirects back.

        Returns:
            Dashboard URL carrying ``success=true`` or an ``error`` message;
            any failure after the state check ends on the generic error
        """
        if not code or not state:
            return self.redirect_url(error="Missing authorization code or store ID")

        state_data = verify_oauth_state(state)
        if not state_data or not state_data.get("store_id"):
            logger.warning("Invalid or expired Stripe Connect state")
            return self.redirect_url(error="Invalid or expired authorization state")

        store_id = state_data["store_id"]
        try:
            return await self._connect(state_data, code, ip_address)
        except PaymentProviderError as e:
            logger.error(f"Error connecting Stripe account for store {store_id}: {e}")
        except Exception:
            logger.exception(f"Unexpected error completing Stripe Connect for store {store_id}")
        return self.redirect_url(error=CONNECT_FAILED)

    async def _connect(
        self, state_data: dict[str, Any], code: str, ip_address: str
    ) -> str:
        store = await self.stores.get_by_id(state_data["store_id"])
        if store is None:
            return self.redirect_url(error="Store not found")

        grant = await self.payments.exchange_connect_code(code)
        updated = await self.stores.update(
            store.id,
            stripe_connect_id=grant.account_id,
            stripe_connect_status=STRIPE_CONNECTED,
            stripe_connected_at=datetime.now(UTC).replace(tzinfo=None),
        )
        self.cache.invalidate_tags(*store_cache_tags(updated))

        await self.audit.log(
            AuditLogEntry(
                action=AuditAction.STRIPE_CONNECTED,
                actor_id=state_data.get("user_id"),
                store_id=store.id,
                resource_type="Store",
                resource_id=store.id,
                metadata={"stripeAccountId": grant.account_id},
                ip_address=ip_address,
            )
        )
        logger.info(f"Connected Stripe account {grant.account_id} to store {store.id}")
        return self.redirect_url(success="true")
