"""
Abstract interface for the append-only audit trail.

Audit records are written for security-relevant mutations (sign-out, store
and product changes, payment account connection) and are never updated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuditAction(str, Enum):
    SIGN_OUT = "SignOut"
    STORE_CREATED = "StoreCreated"
    STORE_UPDATED = "StoreUpdated"
    DOMAIN_UPDATED = "DomainUpdated"
    PRODUCT_CREATED = "ProductCreated"
    PRODUCT_UPDATED = "ProductUpdated"
    PRODUCT_DELETED = "ProductDeleted"
    SHIPPING_LOCATION_CREATED = "ShippingLocationCreated"
    SHIPPING_LOCATION_UPDATED = "ShippingLocationUpdated"
    SHIPPING_LOCATION_DELETED = "ShippingLocationDeleted"
    SHIPPING_LOCATIONS_REORDERED = "ShippingLocationsReordered"
    STRIPE_CONNECTED = "StripeConnected"
    STRIPE_DISCONNECTED = "StripeDisconnected"


@dataclass
class AuditRecord:
    """
    Stored audit log entry.

    Attributes:
        id: Record identifier
        action: What happened
        resource_type: Kind of resource affected (Auth, Store, Product, ...)
        actor_id: User who performed the action
        store_id: Store the action belongs to
        resource_id: Affected resource
        metadata: Extra JSON-serializable details
        ip_address: Client IP, or "unknown"
        created_at: When the action was recorded
    """

    id: str
    action: AuditAction
    resource_type: str
    actor_id: str | None = None
    store_id: str | None = None
    resource_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    created_at: datetime | None = None


class AuditRepository(ABC):
    """Abstract interface for audit log operations."""

    @abstractmethod
    async def append(
        self,
        action: AuditAction,
        resource_type: str,
        actor_id: str | None = None,
        store_id: str | None = None,
        resource_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> AuditRecord:
        """
        Append an audit record.

        Raises:
            Exception: If the record cannot be persisted
        """
        pass

    @abstractmethod
    async def list_recent(
        self,
        actor_id: str | None = None,
        action: AuditAction | None = None,
        limit: int = 100,
    ) -> list[AuditRecord]:
        """List records newest first, optionally filtered by actor and action."""
        pass
