"""Pydantic schemas for API request/response models."""

from medexplain.schemas.admin import (
    AppAdminResponse,
    AuditLogResponse,
    IngestionJobResponse,
    IngestionTriggerRequest,
    ReferenceStats,
    SourceCreate,
    SourceResponse,
    SourceUpdate,
)
from medexplain.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    ListResponse,
    PrincipalResponse,
    ValidationErrorResponse,
)
from medexplain.schemas.evidence import (
    CitationResponse,
    EvidenceFilters,
    GuidelineResponse,
)
from medexplain.schemas.query import QueryRequest, QueryResponse, UsageResponse
from medexplain.schemas.saved_answers import SavedAnswerCreate, SavedAnswerResponse

__all__ = [
    "AppAdminResponse",
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "ListResponse",
    "PrincipalResponse",
    "ValidationErrorResponse",
    # Query
    "QueryRequest",
    "QueryResponse",
    "UsageResponse",
    # Saved answers
    "SavedAnswerCreate",
    "SavedAnswerResponse",
    # Evidence
    "CitationResponse",
    "EvidenceFilters",
    "GuidelineResponse",
    # Admin
    "AuditLogResponse",
    "IngestionJobResponse",
    "IngestionTriggerRequest",
    "ReferenceStats",
    "SourceCreate",
    "SourceResponse",
    "SourceUpdate",
]
