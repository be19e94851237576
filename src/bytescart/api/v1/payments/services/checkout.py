"""
Storefront checkout and order recording.

Customers pay on a Stripe-hosted checkout page opened on the store's
connected account. The cart travels in the session metadata, so the order
can be rebuilt from either the ``checkout.session.completed`` webhook or
the storefront's own verify call after the redirect, whichever comes first.
"""

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from bytescart.api.v1.payments.request import CheckoutRequest, VerifySessionRequest
from bytescart.api.v1.payments.response import VerifySessionResponse
from bytescart.config import Settings
from bytescart.core.logging import logger
from bytescart.domain.services.payment_base import (
    CheckoutLineItem,
    CheckoutSession,
    PaymentProcessorBase,
)
from bytescart.exception_handlers import RouteError
from bytescart.infrastructure.cache import CacheTags, TagCache
from bytescart.infrastructure.repositories.order_repository import (
    ORDER_COMPLETED,
    ORDER_FAILED,
    ORDER_PENDING,
    PAYMENT_PAID,
    NewOrderItem,
    Order,
    OrderRepository,
)
from bytescart.infrastructure.repositories.product_repository import ProductRepository
from bytescart.infrastructure.repositories.store_repository import (
    STRIPE_CONNECTED,
    StoreRepository,
)
from bytescart.utils.security import verify_webhook_signature

UNKNOWN_EMAIL = "unknown@email.com"

SESSION_COMPLETED = "checkout.session.completed"
PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def items_from_metadata(raw: str) -> list[NewOrderItem]:
    """
    Rebuild order lines from the ``items`` metadata of a checkout session.

    Raises:
        ValueError: If the metadata is not the JSON list written at checkout
    """
    lines = json.loads(raw)
    if not isinstance(lines, list):
        raise ValueError("Checkout items metadata is not a list")
    return [
        NewOrderItem(
            product_name=str(line["name"]),
            quantity=int(line["quantity"]),
            unit_price=from_cents(int(line["unitPrice"])),
            product_id=line.get("productId"),
        )
        for line in lines
    ]


def _shipping_from_metadata(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        shipping = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring unreadable shipping info in checkout metadata")
        return None
    return shipping if isinstance(shipping, dict) else None


def _payment_intent_id(session: dict[str, Any]) -> str | None:
    intent = session.get("payment_intent")
    if isinstance(intent, dict):
        return intent.get("id")
    return intent


class CheckoutService:
    """Opens checkout sessions and turns paid sessions into orders."""

    def __init__(
        self,
        settings: Settings,
        stores: StoreRepository,
        products: ProductRepository,
        orders: OrderRepository,
        payments: PaymentProcessorBase,
        cache: TagCache,
    ) -> None:
        self.settings = settings
        self.stores = stores
        self.products = products
        self.orders = orders
        self.payments = payments
        self.cache = cache

    async def create_session(self, data: CheckoutRequest) -> CheckoutSession:
        """
        Open a checkout session for a cart.

        Prices come from the catalog, never from the request.

        Raises:
            RouteError: 400 for an empty cart, an unconnected store or
                unknown products; 404 for an unknown store
            PaymentProviderError: If Stripe rejects the session
        """
        if not data.store_id or not data.items:
            raise RouteError(400, "Missing required fields: storeId, items")

        store = await self.stores.get_by_id(data.store_id)
        if store is None:
            raise RouteError(404, "Store not found")
        if not store.stripe_connect_id or store.stripe_connect_status != STRIPE_CONNECTED:
            raise RouteError(400, "This store has not set up payments yet")

        product_ids = [item.product_id for item in data.items]
        products = {
            product.id: product
            for product in await self.products.list_by_ids(store.id, product_ids)
        }
        if any(product_id not in products for product_id in product_ids):
            raise RouteError(400, "One or more products not found")

        line_items = [
            CheckoutLineItem(
                name=products[item.product_id].name,
                unit_amount=to_cents(products[item.product_id].price),
                quantity=item.quantity,
            )
            for item in data.items
        ]
        metadata = {
            "storeId": store.id,
            "items": json.dumps(
                [
                    {
                        "productId": item.product_id,
                        "name": line.name,
                        "quantity": line.quantity,
                        "unitPrice": line.unit_amount,
                    }
                    for item, line in zip(data.items, line_items, strict=True)
                ]
            ),
        }
        if data.shipping_info:
            metadata["shippingInfo"] = data.shipping_info.model_dump_json(exclude_none=True)

        store_url = self.settings.get_storefront_url(store.subdomain_slug)
        session = await self.payments.create_checkout_session(
            store.stripe_connect_id,
            line_items,
            # {CHECKOUT_SESSION_ID} is filled in by Stripe
            success_url=(
                f"{store_url}?checkout=success"
                f"&session_id={{CHECKOUT_SESSION_ID}}&store_id={store.id}"
            ),
            cancel_url=f"{store_url}?checkout=cancelled",
            currency=self.settings.checkout_currency,
            customer_email=data.customer_email or None,
            metadata=metadata,
        )
        logger.info(f"Opened checkout session {session.id} for store {store.id}")
        return session

    def parse_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """
        Verify and decode a webhook delivery.

        Raises:
            RouteError: 400 for a missing or invalid signature, 500 when no
                signing secret is configured
        """
        if not signature:
            raise RouteError(400, "Missing stripe-signature header")

        secret = self.settings.stripe_webhook_secret
        if not secret:
            logger.error("Stripe webhook secret is not configured")
            raise RouteError(500, "Webhook secret not configured")

        if not verify_webhook_signature(
            payload,
            signature,
            secret,
            tolerance=self.settings.stripe_webhook_tolerance_seconds,
        ):
            logger.warning("Stripe webhook signature verification failed")
            raise RouteError(400, "Invalid signature")

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise RouteError(400, "Invalid payload") from e
        if not isinstance(event, dict):
            raise RouteError(400, "Invalid payload")
        return event

    async def handle_event(self, event: dict[str, Any]) -> None:
        """Apply a verified Stripe event to the orders it concerns."""
        event_type = event.get("type")
        payload = (event.get("data") or {}).get("object") or {}

        if event_type == SESSION_COMPLETED:
            metadata = payload.get("metadata") or {}
            store_id = metadata.get("storeId")
            if not store_id or not metadata.get("items"):
                logger.error(f"Checkout session {payload.get('id')} has no cart metadata")
                return
            # Completed once payment_intent.succeeded arrives
            await self._record(payload, store_id, ORDER_PENDING)
        elif event_type == PAYMENT_SUCCEEDED:
            await self._set_payment_status(payload.get("id"), ORDER_COMPLETED, PAYMENT_PAID)
        elif event_type == PAYMENT_FAILED:
            await self._set_payment_status(payload.get("id"), ORDER_FAILED)
        else:
            logger.debug(f"Ignoring Stripe event {event_type}")

    async def verify_session(self, data: VerifySessionRequest) -> VerifySessionResponse:
        """
        Record the order of a paid session the webhook may not have delivered.

        Raises:
            RouteError: 400 for missing fields or an unpaid session, 404 for
                a store without a connected account
            PaymentProviderError: If the session cannot be retrieved
        """
        if not data.session_id or not data.store_id:
            raise RouteError(400, "Missing sessionId or storeId")

        store = await self.stores.get_by_id(data.store_id)
        if store is None or not store.stripe_connect_id:
            raise RouteError(404, "Store or Stripe account not found")

        existing = await self.orders.get_by_session_id(data.session_id)
        if existing is not None and existing.store_id == store.id:
            if existing.status == ORDER_PENDING:
                await self.orders.update_status(existing.id, ORDER_COMPLETED, PAYMENT_PAID)
                self.cache.invalidate_tags(CacheTags.orders(store.id))
            return VerifySessionResponse(order_id=existing.id, already_exists=True)

        session = await self.payments.retrieve_checkout_session(
            store.stripe_connect_id, data.session_id
        )
        if session.get("payment_status") != "paid":
            raise RouteError(400, "Session not found or payment not completed")
        if not (session.get("metadata") or {}).get("items"):
            raise RouteError(400, "Missing session metadata")

        order = await self._record(session, store.id, ORDER_COMPLETED)
        return VerifySessionResponse(order_id=order.id, already_exists=False)

    async def _record(self, session: dict[str, Any], store_id: str, status: str) -> Order:
        metadata = session.get("metadata") or {}
        details = session.get("customer_details") or {}

        order = await self.orders.create(
            store_id=store_id,
            customer_email=session.get("customer_email") or details.get("email") or UNKNOWN_EMAIL,
            customer_name=details.get("name"),
            total=from_cents(session.get("amount_total") or 0),
            currency=session.get("currency") or self.settings.checkout_currency,
            items=items_from_metadata(metadata["items"]),
            status=status,
            payment_status=PAYMENT_PAID if status == ORDER_COMPLETED else None,
            stripe_payment_id=_payment_intent_id(session),
            stripe_session_id=session.get("id"),
            shipping_info=_shipping_from_metadata(metadata.get("shippingInfo")),
        )
        self.cache.invalidate_tags(CacheTags.orders(store_id))
        return order

    async def _set_payment_status(
        self, payment_id: str | None, status: str, payment_status: str | None = None
    ) -> None:
        if not payment_id:
            return
        orders = await self.orders.update_status_by_payment_id(
            payment_id, status, payment_status
        )
        for store_id in {order.store_id for order in orders}:
            self.cache.invalidate_tags(CacheTags.orders(store_id))
        if orders:
            logger.info(f"Payment {payment_id} marked {status} on {len(orders)} order(s)")
