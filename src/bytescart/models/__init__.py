"""
Models package.

Contains shared Pydantic models used across multiple modules.
Module-specific models are located in their respective module directories.
"""

# Shared models (used by multiple modules)
# Import error models (RFC 7807)
from bytescart.models.errors import ProblemDetail, ValidationErrorDetail
from bytescart.models.shared import (
    ActionResult,
    CamelModel,
    ErrorResponse,
    HealthResponse,
    StoreIdRequest,
)

__all__ = [
    # Shared
    "ActionResult",
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "StoreIdRequest",
    # RFC 7807 Error models
    "ProblemDetail",
    "ValidationErrorDetail",
]
