"""
Database models for MedExplain.

This package contains SQLAlchemy models for:
- Reference data: Source, Drug, Gene, Variant, Phenotype, Guideline,
  Interaction, Citation (read-mostly, populated by external ingestion)
- User-owned data: SavedAnswer, UsageMonthly
- Administration: AppAdmin, IngestionJob, AuditLog

Usage:
    from medexplain.db.models import Drug, Gene, Interaction

All models inherit from the base classes in medexplain.db.base and use:
- UUID7 primary keys (time-sortable, globally unique)
- Timestamp mixins (created_at, updated_at)
"""

from medexplain.db.models.app_admin import AppAdmin
from medexplain.db.models.audit_log import AuditLog
from medexplain.db.models.citation import Citation
from medexplain.db.models.drug import Drug
from medexplain.db.models.gene import Gene
from medexplain.db.models.guideline import Guideline
from medexplain.db.models.ingestion_job import IngestionJob
from medexplain.db.models.interaction import Interaction
from medexplain.db.models.phenotype import Phenotype
from medexplain.db.models.saved_answer import SavedAnswer
from medexplain.db.models.source import Source
from medexplain.db.models.usage_monthly import UsageMonthly
from medexplain.db.models.variant import Variant

__all__ = [
    # Reference data
    "Source",
    "Drug",
    "Gene",
    "Variant",
    "Phenotype",
    "Guideline",
    "Interaction",
    "Citation",
    # User-owned
    "SavedAnswer",
    "UsageMonthly",
    # Administration
    "AppAdmin",
    "IngestionJob",
    "AuditLog",
]
