"""Storefront checkout request models."""

from pydantic import Field

from bytescart.models import CamelModel


class CheckoutItem(CamelModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    variant_id: str | None = Field(None, max_length=64)
    quantity: int = Field(1, ge=1, le=100)


class ShippingInfo(CamelModel):
    """Delivery address entered on the storefront checkout form."""

    country: str | None = Field(None, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=300)
    apartment: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=128)
    state: str | None = Field(None, max_length=128)
    zip_code: str | None = Field(None, max_length=32)
    phone: str | None = Field(None, max_length=40)


class CheckoutRequest(CamelModel):
    """
    Cart submitted by a storefront customer.

    Attributes:
        store_id: Store being bought from
        items: Cart lines; prices are always read from the store's catalog
        customer_email: Prefills the hosted checkout page
        shipping_info: Delivery address, kept on the order
    """

    store_id: str | None = Field(None, max_length=64)
    items: list[CheckoutItem] = Field(default_factory=list, max_length=100)
    customer_email: str | None = Field(None, max_length=255)
    shipping_info: ShippingInfo | None = None


class VerifySessionRequest(CamelModel):
    session_id: str | None = Field(None, max_length=255)
    store_id: str | None = Field(None, max_length=64)
