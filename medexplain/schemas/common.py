"""Common Pydantic schemas used across API endpoints."""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Generic type for list responses
T = TypeVar("T")


# =============================================================================
# Lists
# =============================================================================


class ListResponse(BaseModel, Generic[T]):
    """Generic list wrapper for newest-first, fixed-limit listings."""

    items: list[T]
    count: int = Field(description="Number of items returned")
    limit: int | None = Field(default=None, description="Maximum items the listing returns")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def create(cls, items: list[T], limit: int | None = None) -> "ListResponse[T]":
        """Factory method to create a list response."""
        return cls(items=items, count=len(items), limit=limit)


# =============================================================================
# Error Responses
# =============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(description="Error message")
    code: str | None = Field(default=None, description="Error code")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(description="Error type")
    message: str = Field(description="Human-readable error message")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Additional error details"
    )
    request_id: str | None = Field(default=None, description="Request ID for tracing")


class ValidationErrorResponse(BaseModel):
    """Validation error response (422)."""

    detail: list[dict[str, Any]] = Field(description="Validation error details")


# =============================================================================
# Common Fields
# =============================================================================


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: datetime = Field(description="Creation timestamp")


class UUIDMixin(BaseModel):
    """Mixin for UUID primary key."""

    id: UUID = Field(description="Unique identifier")


class BaseResponse(UUIDMixin, TimestampMixin):
    """Base response model with ID and timestamps."""

    model_config = ConfigDict(from_attributes=True)


class PrincipalResponse(BaseModel):
    """The authenticated caller as seen by the access control layer."""

    user_id: UUID = Field(description="Auth provider user id")
    email: str | None = Field(default=None, description="Email claim, if present")
    is_admin: bool = Field(description="Whether the caller is an administrator")
