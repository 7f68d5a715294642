"""
Database package - SQLAlchemy models, session management, and utilities.

Usage:
    from medexplain.db import Base, get_db, get_db_context
    from medexplain.db import Drug, Gene, Interaction, SavedAnswer
    from medexplain.db import ViewMode, IngestionJobStatus
"""

from medexplain.db.base import (
    AsyncSessionLocal,
    Base,
    CreatedAtMixin,
    JSONType,
    TimestampMixin,
    UUIDMixin,
    dispose_engine,
    drop_db,
    engine,
    init_db,
    metadata,
    utc_now,
)
from medexplain.db.enums import (
    AuditAction,
    EvidenceLevel,
    IngestionJobStatus,
    IngestionJobType,
    ViewMode,
    is_valid_evidence_level,
)
from medexplain.db.models import (
    AppAdmin,
    AuditLog,
    Citation,
    Drug,
    Gene,
    Guideline,
    IngestionJob,
    Interaction,
    Phenotype,
    SavedAnswer,
    Source,
    UsageMonthly,
    Variant,
)
from medexplain.db.session import get_db, get_db_context, transaction

__all__ = [
    # Base classes
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "CreatedAtMixin",
    "JSONType",
    # Enums
    "AuditAction",
    "EvidenceLevel",
    "IngestionJobStatus",
    "IngestionJobType",
    "ViewMode",
    "is_valid_evidence_level",
    # Models
    "AppAdmin",
    "AuditLog",
    "Citation",
    "Drug",
    "Gene",
    "Guideline",
    "IngestionJob",
    "Interaction",
    "Phenotype",
    "SavedAnswer",
    "Source",
    "UsageMonthly",
    "Variant",
    # Engine and factory
    "engine",
    "AsyncSessionLocal",
    "metadata",
    "utc_now",
    # Session utilities
    "get_db",
    "get_db_context",
    "transaction",
    # Lifecycle
    "init_db",
    "drop_db",
    "dispose_engine",
]
