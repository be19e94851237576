"""Stripe Connect and checkout response models."""

from pydantic import BaseModel, Field

from bytescart.models import CamelModel


class ConnectInitiateResponse(BaseModel):
    url: str = Field(..., description="Stripe Connect authorization URL")


class CheckoutResponse(BaseModel):
    url: str | None = Field(..., description="Hosted checkout page")


class WebhookResponse(BaseModel):
    received: bool = True


class VerifySessionResponse(CamelModel):
    success: bool = True
    order_id: str
    already_exists: bool = Field(..., description="The order had been recorded before")
