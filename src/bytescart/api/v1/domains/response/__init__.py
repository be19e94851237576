"""Custom domain response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from bytescart.domain.domains import DomainStatus
from bytescart.models import CamelModel


class DomainCheckResponse(CamelModel):
    """Result of a domain verification pass."""

    status: DomainStatus = Field(..., description="Domain status after the check")
    domain: str = Field(..., description="Custom domain checked")
    verified: bool = Field(..., description="Whether DNS points at the platform")
    message: str | None = Field(None, description="User-facing status message")
    certificate_generated_at: datetime | None = Field(
        None, description="When the TLS certificate was issued"
    )


class DomainLookupResponse(BaseModel):
    slug: str | None = Field(None, description="Subdomain slug of the matching store")
