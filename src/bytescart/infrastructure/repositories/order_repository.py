"""Abstract interface for order persistence and sales statistics."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

ORDER_PENDING = "Pending"
ORDER_COMPLETED = "Completed"
ORDER_FAILED = "Failed"

PAYMENT_PAID = "Paid"


@dataclass
class OrderItem:
    id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    product_id: str | None = None


@dataclass
class Order:
    """
    Customer order placed on a storefront.

    Attributes:
        id: Order identifier
        store_id: Store that sold the items
        customer_email: Buyer email
        customer_name: Buyer name, if given
        total: Order total in ``currency``
        currency: ISO currency code (lowercase)
        status: Order status (Pending, Completed, Failed)
        payment_status: Payment state reported by Stripe (e.g. Paid)
        stripe_payment_id: Payment intent that settled the order
        stripe_session_id: Checkout session that created the order
        shipping_info: Shipping details captured at checkout
        created_at: When the order was placed
        items: Purchased line items
    """

    id: str
    store_id: str
    customer_email: str
    total: Decimal
    currency: str = "usd"
    status: str = ORDER_PENDING
    customer_name: str | None = None
    payment_status: str | None = None
    stripe_payment_id: str | None = None
    stripe_session_id: str | None = None
    shipping_info: dict[str, Any] | None = None
    created_at: datetime | None = None
    items: list[OrderItem] = field(default_factory=list)


@dataclass
class OrderStats:
    """Aggregate sales figures for a store's dashboard."""

    total_orders: int
    total_revenue: Decimal
    last_7_days_orders: int
    last_30_days_orders: int


@dataclass
class NewOrderItem:
    product_name: str
    quantity: int
    unit_price: Decimal
    product_id: str | None = None


class OrderRepository(ABC):
    """Abstract interface for order operations."""

    @abstractmethod
    async def list_for_store(
        self,
        store_id: str,
        since: datetime | None = None,
        limit: int = 50,
    ) -> list[Order]:
        """
        List a store's orders, newest first.

        Args:
            store_id: Store identifier
            since: Only orders created at or after this time (naive UTC)
            limit: Maximum number of orders returned

        Returns:
            Orders with their items
        """
        pass

    @abstractmethod
    async def stats_for_store(self, store_id: str, now: datetime) -> OrderStats:
        """
        Compute order statistics relative to ``now`` (naive UTC).

        Counts and revenue include every order regardless of status.
        """
        pass

    @abstractmethod
    async def create(
        self,
        store_id: str,
        customer_email: str,
        total: Decimal,
        items: list[NewOrderItem],
        currency: str = "usd",
        status: str = ORDER_PENDING,
        customer_name: str | None = None,
        created_at: datetime | None = None,
        payment_status: str | None = None,
        stripe_payment_id: str | None = None,
        stripe_session_id: str | None = None,
        shipping_info: dict[str, Any] | None = None,
    ) -> Order:
        """
        Record an order with its items.

        A checkout session is recorded at most once: creating a second order
        for the same ``stripe_session_id`` returns the existing one.
        """
        pass

    @abstractmethod
    async def get_by_session_id(self, session_id: str) -> Order | None:
        pass

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: str,
        payment_status: str | None = None,
        stripe_payment_id: str | None = None,
    ) -> Order:
        """Set an order's status; None leaves the optional fields unchanged."""
        pass

    @abstractmethod
    async def update_status_by_payment_id(
        self, payment_id: str, status: str, payment_status: str | None = None
    ) -> list[Order]:
        """
        Set the status of every order settled by ``payment_id``.

        Returns:
            The updated orders; empty when none matched
        """
        pass
