"""Store lookup response models."""

from pydantic import Field

from bytescart.domain.domains import DomainStatus
from bytescart.models import CamelModel


class ShippingLocationItem(CamelModel):
    """Destination shown at checkout."""

    country: str = Field(..., description="Country name")
    cities: list[str] = Field(default_factory=list, description="Served cities")


class ShippingLocationsResponse(CamelModel):
    locations: list[ShippingLocationItem] = Field(
        ..., description="Locations ordered by sort order"
    )


class DomainStore(CamelModel):
    """Public fields of a store resolved from its custom domain."""

    id: str
    subdomain_slug: str
    store_name: str
    domain: str | None
    domain_status: DomainStatus


class StoreByDomainResponse(CamelModel):
    store: DomainStore
