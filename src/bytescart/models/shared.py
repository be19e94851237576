"""
Shared data models used across the application.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (the dashboard's JSON shape)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok", description="Service status")
    version: str = Field(..., description="Backend version")
    message: str | None = Field(None, description="Optional message")


class ErrorResponse(BaseModel):
    """Error body returned by route handlers and server actions."""

    error: str = Field(..., description="Error message")


class ActionResult(BaseModel):
    """Outcome of a server action."""

    success: bool = Field(..., description="Whether the action succeeded")
    error: str | None = Field(None, description="Error message on failure")
    data: Any | None = Field(None, description="Action payload on success")


class StoreIdRequest(CamelModel):
    """Body carrying the target store. Presence is checked by the handler."""

    store_id: str | None = Field(None, description="Store identifier")
