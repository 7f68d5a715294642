"""
Controlled vocabulary enums for MedExplain.

This module defines the allowed values for:
- View modes (patient vs clinician framing of an answer)
- Guideline evidence levels
- Ingestion job types and statuses
- Audit log actions

Values are stored as plain text columns so the external ingestion pipeline
can write them without knowing about database enum types.
"""

from enum import Enum


class ViewMode(str, Enum):
    """
    Audience an answer is rendered for.

    Stored on SavedAnswer.user_type with the same string values.
    """

    PATIENT = "Patient"
    CLINICIAN = "Clinician"

    @classmethod
    def from_string(cls, value: str) -> "ViewMode | None":
        """
        Convert a string to ViewMode, case-insensitively.

        Examples:
            ViewMode.from_string("patient")    -> ViewMode.PATIENT
            ViewMode.from_string("CLINICIAN")  -> ViewMode.CLINICIAN
            ViewMode.from_string("nurse")      -> None
        """
        if not value:
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class EvidenceLevel(str, Enum):
    """Strength of evidence behind a guideline recommendation."""

    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all valid evidence level values."""
        return [member.value for member in cls]


class IngestionJobType(str, Enum):
    """External ingestion pipelines that can be triggered from the admin API."""

    FDA = "FDA Ingestion"
    GENE_VARIANT = "Gene/Variant Ingestion"


class IngestionJobStatus(str, Enum):
    """
    Ingestion job lifecycle.

    Lifecycle:
        PENDING -> RUNNING -> COMPLETED
                          |-> FAILED

    Only PENDING is ever written by this service; the external pipeline
    owns every later transition.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self in (IngestionJobStatus.COMPLETED, IngestionJobStatus.FAILED)


class AuditAction(str, Enum):
    """Types of auditable actions."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TRIGGER_INGESTION = "TRIGGER_INGESTION"


def is_valid_evidence_level(value: str | None) -> bool:
    """Check if a string is a known evidence level (exact match)."""
    return value in EvidenceLevel.values()
