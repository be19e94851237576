"""Abstract interface for a store's shipping destinations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class ShippingLocation:
    """
    Country a store ships to, optionally restricted to some cities.

    Attributes:
        id: Location identifier
        store_id: Owning store
        country: Country name
        cities: Cities served; empty means the whole country
        sort_order: Position in the checkout list (ascending)
    """

    id: str
    store_id: str
    country: str
    cities: list[str] = field(default_factory=list)
    sort_order: int = 0


class ShippingLocationRepository(ABC):
    """Abstract interface for shipping location operations."""

    @abstractmethod
    async def list_for_store(self, store_id: str) -> list[ShippingLocation]:
        """
        List a store's shipping locations.

        Returns:
            Locations ordered by sort_order ascending
        """
        pass

    @abstractmethod
    async def get(self, location_id: str) -> ShippingLocation | None:
        pass

    @abstractmethod
    async def create(
        self, store_id: str, country: str, cities: list[str]
    ) -> ShippingLocation:
        """Append a location after the store's existing ones."""
        pass

    @abstractmethod
    async def update(
        self, location_id: str, country: str, cities: list[str]
    ) -> ShippingLocation:
        pass

    @abstractmethod
    async def delete(self, location_id: str) -> None:
        pass

    @abstractmethod
    async def reorder(self, store_id: str, location_ids: list[str]) -> None:
        """
        Set sort_order to each id's position in ``location_ids``.

        Ids not belonging to the store are ignored.
        """
        pass
