"""Abstract repository interfaces for persistence operations."""

from bytescart.infrastructure.repositories.audit_repository import (
    AuditAction,
    AuditRecord,
    AuditRepository,
)
from bytescart.infrastructure.repositories.order_repository import (
    NewOrderItem,
    Order,
    OrderItem,
    OrderRepository,
    OrderStats,
)
from bytescart.infrastructure.repositories.product_repository import (
    Product,
    ProductRepository,
)
from bytescart.infrastructure.repositories.shipping_location_repository import (
    ShippingLocation,
    ShippingLocationRepository,
)
from bytescart.infrastructure.repositories.store_repository import (
    STRIPE_CONNECTED,
    STRIPE_NOT_CONNECTED,
    Store,
    StoreNotFoundError,
    StoreRepository,
    StoreSlugTakenError,
)

__all__ = [
    "AuditAction",
    "AuditRecord",
    "AuditRepository",
    "NewOrderItem",
    "Order",
    "OrderItem",
    "OrderRepository",
    "OrderStats",
    "Product",
    "ProductRepository",
    "STRIPE_CONNECTED",
    "STRIPE_NOT_CONNECTED",
    "ShippingLocation",
    "ShippingLocationRepository",
    "Store",
    "StoreNotFoundError",
    "StoreRepository",
    "StoreSlugTakenError",
]
