"""
Services package - Business logic and external API clients.

This package contains:
- Usage metering with the monthly query quota
- Query resolution and answer rendering
- Saved answers owned by a single user
- The read-only evidence browser
- Admin operations and the ingestion webhook client
"""

from medexplain.services.admin import AdminService
from medexplain.services.evidence import EvidenceService, FilterOptions, GuidelineView
from medexplain.services.query import (
    NO_INFORMATION,
    NOT_AVAILABLE,
    QueryResult,
    QueryService,
    format_citation,
    render_answer,
    render_clinician_answer,
    render_patient_answer,
)
from medexplain.services.saved_answers import SavedAnswerService
from medexplain.services.usage import UsageMeter, UsageSnapshot, current_month
from medexplain.services.webhooks import WebhookClient

__all__ = [
    # Usage
    "UsageMeter",
    "UsageSnapshot",
    "current_month",
    # Query
    "QueryService",
    "QueryResult",
    "render_answer",
    "render_patient_answer",
    "render_clinician_answer",
    "format_citation",
    "NO_INFORMATION",
    "NOT_AVAILABLE",
    # Saved answers
    "SavedAnswerService",
    # Evidence
    "EvidenceService",
    "GuidelineView",
    "FilterOptions",
    # Admin
    "AdminService",
    "WebhookClient",
]
