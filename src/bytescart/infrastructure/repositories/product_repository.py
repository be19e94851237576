"""Abstract interface for product persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Product:
    """
    Product listed by a store.

    Attributes:
        id: Product identifier
        store_id: Owning store
        name: Product name
        price: Unit price in the store currency
        image_url: Primary image, if any
        created_at: Creation timestamp
    """

    id: str
    store_id: str
    name: str
    price: Decimal
    image_url: str | None = None
    created_at: datetime | None = None


class ProductRepository(ABC):
    """Abstract interface for product operations."""

    @abstractmethod
    async def get(self, product_id: str) -> Product | None:
        pass

    @abstractmethod
    async def list_for_store(self, store_id: str) -> list[Product]:
        """List a store's products, newest first."""
        pass

    @abstractmethod
    async def list_by_ids(self, store_id: str, product_ids: list[str]) -> list[Product]:
        """Products of ``store_id`` among ``product_ids``; unknown ids are skipped."""
        pass

    @abstractmethod
    async def create(
        self,
        store_id: str,
        name: str,
        price: Decimal,
        image_url: str | None = None,
    ) -> Product:
        pass

    @abstractmethod
    async def update(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        image_url: str | None = None,
    ) -> Product:
        """
        Update a product.

        ``image_url`` of None keeps the current image.
        """
        pass

    @abstractmethod
    async def delete(self, product_id: str) -> None:
        pass
