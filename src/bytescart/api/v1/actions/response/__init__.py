"""Server Action Response Models."""

from datetime import datetime
from typing import Any

from pydantic import Field

from bytescart.domain.domains import DomainStatus
from bytescart.infrastructure.repositories import (
    Order,
    OrderStats,
    Product,
    ShippingLocation,
    Store,
)
from bytescart.models import CamelModel


class StoreResponse(CamelModel):
    id: str
    store_name: str
    subdomain_slug: str
    theme_id: str | None = None
    about_text: str | None = None
    domain: str | None = None
    domain_status: DomainStatus
    stripe_connect_status: str

    @classmethod
    def from_store(cls, store: Store) -> "StoreResponse":
        return cls(
            id=store.id,
            store_name=store.store_name,
            subdomain_slug=store.subdomain_slug,
            theme_id=store.theme_id,
            about_text=store.about_text,
            domain=store.domain,
            domain_status=store.domain_status,
            stripe_connect_status=store.stripe_connect_status,
        )


class DnsRecord(CamelModel):
    """DNS record the owner must create at their registrar."""

    type: str = Field(..., description="Record type (A or CNAME)")
    name: str = Field(..., description="Host name")
    value: str = Field(..., description="Record value")


class DomainUpdateResponse(CamelModel):
    domain: str | None = Field(None, description="Normalized custom domain")
    status: DomainStatus
    message: str
    dns_records: list[DnsRecord] = Field(default_factory=list)


class ShippingLocationResponse(CamelModel):
    id: str
    country: str
    cities: list[str]
    sort_order: int

    @classmethod
    def from_location(cls, location: ShippingLocation) -> "ShippingLocationResponse":
        return cls(
            id=location.id,
            country=location.country,
            cities=location.cities,
            sort_order=location.sort_order,
        )


class ProductResponse(CamelModel):
    """Product as sent to the dashboard. Prices are decimal strings."""

    id: str
    store_id: str
    name: str
    price: str
    image_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            store_id=product.store_id,
            name=product.name,
            price=str(product.price),
            image_url=product.image_url,
            created_at=product.created_at,
        )


class OrderItemResponse(CamelModel):
    product_name: str
    quantity: int
    unit_price: str


class OrderResponse(CamelModel):
    id: str
    customer_email: str
    customer_name: str | None = None
    total: str
    currency: str
    status: str
    payment_status: str | None = None
    shipping_info: dict[str, Any] | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            total=str(order.total),
            currency=order.currency,
            status=order.status,
            payment_status=order.payment_status,
            shipping_info=order.shipping_info,
            created_at=order.created_at,
            items=[
                OrderItemResponse(
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                )
                for item in order.items
            ],
        )


class OrdersResponse(CamelModel):
    orders: list[OrderResponse]


class OrderStatsResponse(CamelModel):
    total_orders: int
    total_revenue: str
    last_7_days_orders: int = Field(..., alias="last7DaysOrders")
    last_30_days_orders: int = Field(..., alias="last30DaysOrders")

    @classmethod
    def from_stats(cls, stats: OrderStats) -> "OrderStatsResponse":
        return cls(
            total_orders=stats.total_orders,
            total_revenue=str(stats.total_revenue),
            last_7_days_orders=stats.last_7_days_orders,
            last_30_days_orders=stats.last_30_days_orders,
        )
