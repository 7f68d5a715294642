"""Pydantic schemas for admin endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from medexplain.db.enums import IngestionJobStatus, IngestionJobType
from medexplain.schemas.common import BaseResponse

# =============================================================================
# Sources
# =============================================================================


class SourceCreate(BaseModel):
    """Fields for a new source."""

    name: str = Field(min_length=1, max_length=200, description="Source name")
    url: str | None = Field(default=None, description="Reference URL")
    description: str | None = Field(default=None, description="Description")
    is_active: bool = Field(default=True, description="Whether the source is active")


class SourceUpdate(BaseModel):
    """Partial update for a source; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    url: str | None = None
    description: str | None = None
    is_active: bool | None = None

    @field_validator("name", "is_active")
    @classmethod
    def not_null(cls, value):
        # Omit the field to leave it unchanged; both columns are NOT NULL
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class SourceResponse(BaseResponse):
    """A source."""

    name: str
    url: str | None = None
    description: str | None = None
    is_active: bool
    updated_at: datetime


# =============================================================================
# Admins
# =============================================================================


class AppAdminResponse(BaseResponse):
    """An administrator membership row."""

    user_id: UUID = Field(description="Auth provider user id")
    email: str


# =============================================================================
# Ingestion Jobs
# =============================================================================


class IngestionTriggerRequest(BaseModel):
    """Request to trigger an external ingestion pipeline."""

    job_type: IngestionJobType = Field(description="Pipeline to trigger")


class IngestionJobResponse(BaseResponse):
    """An ingestion job row."""

    job_type: str
    status: IngestionJobStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    records_processed: int = 0
    error_message: str | None = None
    is_terminal: bool = Field(default=False, description="Pipeline reported a final state")
    duration_seconds: float | None = Field(default=None, description="Run time once completed")


# =============================================================================
# Audit Log / Stats
# =============================================================================


class AuditLogResponse(BaseResponse):
    """An audit log entry."""

    user_id: UUID | None = Field(default=None, description="Acting user (null = system)")
    action: str
    table_name: str | None = None
    record_id: UUID | None = None
    old_data: dict | None = None
    new_data: dict | None = None

    model_config = ConfigDict(from_attributes=True)


class ReferenceStats(BaseModel):
    """Reference data counts for the admin dashboard."""

    total_drugs: int = Field(description="Total drugs")
    total_genes: int = Field(description="Total genes")
    total_guidelines: int = Field(description="Total guidelines")
