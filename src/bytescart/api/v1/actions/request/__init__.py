"""Server Action Request Models."""

from decimal import Decimal

from pydantic import Field, field_validator

from bytescart.models import CamelModel
from bytescart.utils.security import sanitize_string, sanitize_url


class CreateStoreRequest(CamelModel):
    """
    Request to create the user's store.

    Attributes:
        store_name: Display name
        subdomain_slug: Slug used in the storefront URL
        theme_id: Initial theme
    """

    store_name: str = Field(..., description="Store display name", min_length=1, max_length=100)
    subdomain_slug: str = Field(
        ...,
        description="Storefront subdomain slug",
        min_length=3,
        max_length=63,
        pattern=r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$",
    )
    theme_id: str | None = Field(None, description="Initial theme", max_length=64)

    @field_validator("subdomain_slug", mode="before")
    @classmethod
    def normalize_slug(cls, v: object) -> object:
        """Lowercase and trim the slug before pattern checks."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("store_name")
    @classmethod
    def clean_store_name(cls, v: str) -> str:
        cleaned = sanitize_string(v, max_length=100)
        if not cleaned:
            raise ValueError("Store name is required")
        return cleaned


class UpdateStoreSettingsRequest(CamelModel):
    """Store settings to change. Omitted fields are left untouched."""

    store_name: str | None = Field(None, min_length=1, max_length=100)
    about_text: str | None = Field(None, max_length=5000)
    theme_id: str | None = Field(None, max_length=64)

    @field_validator("store_name")
    @classmethod
    def clean_store_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        cleaned = sanitize_string(v, max_length=100)
        if not cleaned:
            raise ValueError("Store name cannot be empty")
        return cleaned

    @field_validator("about_text")
    @classmethod
    def clean_about_text(cls, v: str | None) -> str | None:
        return None if v is None else sanitize_string(v, max_length=5000)


class UpdateDomainRequest(CamelModel):
    """Custom domain to set. An empty or missing domain removes it."""

    domain: str | None = Field(None, description="Custom domain", max_length=300)


class ShippingLocationRequest(CamelModel):
    """
    Shipping destination.

    Attributes:
        country: Country name
        cities: Cities served in that country (empty means the whole country)
    """

    country: str = Field(..., min_length=1, max_length=100)
    cities: list[str] = Field(default_factory=list, max_length=200)

    @field_validator("country")
    @classmethod
    def clean_country(cls, v: str) -> str:
        cleaned = sanitize_string(v, max_length=100)
        if not cleaned:
            raise ValueError("Country is required")
        return cleaned

    @field_validator("cities")
    @classmethod
    def clean_cities(cls, v: list[str]) -> list[str]:
        """Drop blank entries and duplicates, keeping the first occurrence."""
        cities: list[str] = []
        for city in v:
            cleaned = sanitize_string(city, max_length=100)
            if cleaned and cleaned not in cities:
                cities.append(cleaned)
        return cities


class ReorderShippingLocationsRequest(CamelModel):
    location_ids: list[str] = Field(
        ..., description="Location ids in their new order", min_length=1
    )


class ProductRequest(CamelModel):
    """
    Product fields for create and update.

    Attributes:
        name: Product name
        price: Price in the store currency, two decimals at most
        image_url: Public http(s) image URL
    """

    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: str | None = Field(None, max_length=2048)

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        cleaned = sanitize_string(v, max_length=200)
        if not cleaned:
            raise ValueError("Product name is required")
        return cleaned

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        if not v:
            return None
        url = sanitize_url(v)
        if url is None or url.lower().startswith("mailto:"):
            raise ValueError("Image URL must be an http or https URL")
        return url.strip()
