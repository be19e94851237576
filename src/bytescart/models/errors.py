"""Error response models following RFC 7807 Problem Details."""

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field, model_validator

RFC7231_BASE = "https://datatracker.ietf.org/doc/html/rfc7231#section-"

# Status code -> RFC 7231 section, or a full URL for codes defined elsewhere
status_to_section: dict[int, str] = {
    400: "6.5.1",
    401: "https://datatracker.ietf.org/doc/html/rfc7235#section-3.1",
    403: "6.5.3",
    404: "6.5.4",
    405: "6.5.5",
    409: "6.5.8",
    429: "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
    500: "6.6.1",
    502: "6.6.3",
    503: "6.6.4",
}


def get_rfc_section_url(status: int) -> str:
    """RFC reference for a status code.

    Unknown codes point at 500 Internal Server Error.
    """
    section = status_to_section.get(status, status_to_section[500])
    if section.startswith("https://"):
        return section
    return f"{RFC7231_BASE}{section}"


def status_title(status: int) -> str:
    """Standard reason phrase for a status code."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


class ValidationErrorDetail(BaseModel):
    """One entry of a pydantic validation failure, as reported to clients."""

    type: str = Field(..., description="pydantic error type, e.g. missing")
    loc: tuple[str, ...] = Field(..., description="Path to the offending value")
    msg: str = Field(..., description="Message for the field")
    input: Any = Field(None, description="Value that failed validation")
    ctx: dict[str, Any] | None = Field(None, description="Error context from pydantic")


class ProblemDetail(BaseModel):
    """RFC 7807 body for validation failures, HTTPException and crashes.

    Route handlers report expected failures as ``{"error": ...}`` instead.
    """

    type: str | None = Field(
        default=None,
        description="RFC section describing the status",
        json_schema_extra={"example": f"{RFC7231_BASE}6.5.1"},
    )
    title: str = Field(
        ...,
        description="Reason phrase or error class",
        json_schema_extra={"example": "Validation Error"},
    )
    status: int = Field(..., description="HTTP status code", json_schema_extra={"example": 400})
    detail: str | None = Field(
        default=None,
        description="What went wrong",
        json_schema_extra={"example": "One or more validation errors occurred (1 error)."},
    )
    instance: str | None = Field(
        default=None,
        description="Request path",
        json_schema_extra={"example": "/actions/stores/abc/products"},
    )
    errors: list[ValidationErrorDetail] | None = Field(
        default=None,
        description="Field errors, only on validation failures",
        json_schema_extra={
            "example": [
                {
                    "type": "missing",
                    "loc": ["body", "price"],
                    "msg": "Field required",
                    "input": {"name": "Mug"},
                }
            ]
        },
    )

    @model_validator(mode="before")
    @classmethod
    def fill_type_from_status(cls, values: dict[str, Any]) -> dict[str, Any]:
        if isinstance(values, dict) and values.get("type") is None:
            values["type"] = get_rfc_section_url(values.get("status", 500))
        return values

    @classmethod
    def for_status(
        cls,
        status: int,
        detail: str | None = None,
        instance: str | None = None,
        title: str | None = None,
        errors: list[ValidationErrorDetail] | None = None,
    ) -> "ProblemDetail":
        """Build a problem with the standard title for ``status``."""
        return cls(
            title=title or status_title(status),
            status=status,
            detail=detail,
            instance=instance,
            errors=errors,
        )
