"""
Stripe Connect account status for a store owner's dashboard.

The status combines the store row with three reads from the payment
processor (account, balance, recent payouts). The reads run concurrently in
a task group and the result is all-or-nothing: the first failure cancels the
other reads and StripeAccountStatusError is raised.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from bytescart.domain.services.auth_base import AuthUser
from bytescart.domain.services.payment_base import (
    PaymentProcessorBase,
    PaymentProviderError,
)
from bytescart.infrastructure.repositories.store_repository import (
    STRIPE_CONNECTED,
    StoreRepository,
)

RECENT_PAYOUTS_LIMIT = 10


class StripeAccountStatusError(Exception):
    """Raised when the account status cannot be assembled from the processor."""


class StripeAccountService:
    def __init__(self, stores: StoreRepository, payments: PaymentProcessorBase):
        self.stores = stores
        self.payments = payments

    async def get_status(self, user: AuthUser | None) -> dict[str, Any] | None:
        """
        Build the account status for the user's store.

        Args:
            user: Authenticated user, or None

        Returns:
            Status dict with camelCase keys, or None when there is no user or
            the user has no store

        Raises:
            StripeAccountStatusError: If any processor read fails
        """
        if user is None:
            return None

        store = await self.stores.get_by_owner(user.id)
        if store is None:
            return None

        status: dict[str, Any] = {
            "storeId": store.id,
            "isConnected": store.stripe_connect_status == STRIPE_CONNECTED
            and bool(store.stripe_connect_id),
            "status": store.stripe_connect_status,
            "connectedAt": (
                store.stripe_connected_at.isoformat()
                if store.stripe_connected_at
                else None
            ),
        }

        if not store.stripe_connect_id:
            status["isConnected"] = False
            return status

        account_id = store.stripe_connect_id
        try:
            async with asyncio.TaskGroup() as group:
                account_task = group.create_task(self.payments.get_account(account_id))
                balance_task = group.create_task(self.payments.get_balance(account_id))
                payouts_task = group.create_task(
                    self.payments.list_payouts(account_id, limit=RECENT_PAYOUTS_LIMIT)
                )
        except ExceptionGroup as failures:
            provider_errors, _ = failures.split(PaymentProviderError)
            if provider_errors is None:
                raise
            error = provider_errors.exceptions[0]
            logger.error(f"Failed to fetch Stripe account {account_id}: {error}")
            raise StripeAccountStatusError(str(error)) from error

        account = account_task.result()
        balance = balance_task.result()
        payouts = payouts_task.result()

        status["account"] = {
            "id": account.get("id", account_id),
            "email": account.get("email"),
            "chargesEnabled": bool(account.get("charges_enabled")),
            "payoutsEnabled": bool(account.get("payouts_enabled")),
        }
        status["balance"] = {
            "available": [_money(item) for item in balance.get("available", [])],
            "pending": [_money(item) for item in balance.get("pending", [])],
        }
        status["recentPayouts"] = [
            {
                "id": payout.get("id"),
                "amount": payout.get("amount", 0),
                "currency": payout.get("currency"),
                "status": payout.get("status"),
                "arrivalDate": _timestamp(payout.get("arrival_date")),
            }
            for payout in payouts
        ]
        return status


def _money(item: dict[str, Any]) -> dict[str, Any]:
    return {"amount": item.get("amount", 0), "currency": item.get("currency")}


def _timestamp(value: int | None) -> str | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=UTC).isoformat()
