"""
Abstract interface for store persistence.

A store belongs to exactly one owner (the authenticated user who created it)
and is addressed publicly by its subdomain slug or, once verified, by its
custom domain.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bytescart.domain.domains import DomainStatus

STRIPE_NOT_CONNECTED = "NotConnected"
STRIPE_CONNECTED = "Connected"


@dataclass
class Store:
    """
    Store metadata.

    Attributes:
        id: Store identifier
        owner_id: Auth provider id of the owner
        store_name: Display name
        subdomain_slug: Unique slug used in storefront URLs
        theme_id: Selected theme
        about_text: Free text shown on the about page
        domain: Normalized custom domain, if any
        domain_status: Verification state of the custom domain
        certificate_generated_at: When the hosting provider issued TLS
        stripe_connect_id: Connected payment account id
        stripe_connect_status: NotConnected or Connected
        stripe_connected_at: When the account was connected
        created_at: Creation timestamp
    """

    id: str
    owner_id: str
    store_name: str
    subdomain_slug: str
    theme_id: str | None = None
    about_text: str | None = None
    domain: str | None = None
    domain_status: DomainStatus = DomainStatus.PENDING
    certificate_generated_at: datetime | None = None
    stripe_connect_id: str | None = None
    stripe_connect_status: str = STRIPE_NOT_CONNECTED
    stripe_connected_at: datetime | None = None
    created_at: datetime | None = None


class StoreRepository(ABC):
    """Abstract interface for store operations."""

    @abstractmethod
    async def get_by_id(self, store_id: str) -> Store | None:
        """
        Retrieve a store by id.

        Args:
            store_id: Store identifier

        Returns:
            Store if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Store | None:
        """Retrieve a store by its subdomain slug."""
        pass

    @abstractmethod
    async def get_by_owner(self, owner_id: str) -> Store | None:
        """Retrieve the store owned by a user (one store per owner)."""
        pass

    @abstractmethod
    async def get_owned(self, store_id: str, owner_id: str) -> Store | None:
        """
        Retrieve a store only if it belongs to the given owner.

        Returns:
            Store if found and owned, None otherwise
        """
        pass

    @abstractmethod
    async def find_live_by_domain(self, candidates: list[str]) -> Store | None:
        """
        Find a store with a Live custom domain matching any candidate.

        Args:
            candidates: Domain values to match exactly

        Returns:
            First matching store, None otherwise
        """
        pass

    @abstractmethod
    async def domain_taken(self, domain: str, exclude_store_id: str) -> bool:
        """Check whether another store already uses a custom domain."""
        pass

    @abstractmethod
    async def create(
        self,
        owner_id: str,
        store_name: str,
        subdomain_slug: str,
        theme_id: str | None = None,
    ) -> Store:
        """
        Create a new store.

        Raises:
            StoreSlugTakenError: If the slug is already used
        """
        pass

    @abstractmethod
    async def update(self, store_id: str, **fields: Any) -> Store:
        """
        Update store fields.

        Args:
            store_id: Store identifier
            **fields: Store attributes to set (None values are written as-is)

        Returns:
            Updated store

        Raises:
            StoreNotFoundError: If the store does not exist
        """
        pass


class StoreNotFoundError(LookupError):
    """Raised when a store to update does not exist."""


class StoreSlugTakenError(ValueError):
    """Raised when a subdomain slug is already used by another store."""
