"""
AuditLog model: append-only record of administrative actions.

Entries are written by the service itself (never through a caller-facing
write API) and are readable by administrators only. A null user_id means
the action is attributed to the system.

Usage:
    async with transaction(session):
        session.add(
            AuditLog.create_update(
                user_id=principal.user_id,
                table_name="sources",
                record_id=source.id,
                old_data=before,
                new_data=source.to_dict(),
            )
        )
"""

import uuid

from sqlalchemy import Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, CreatedAtMixin, JSONType, UUIDMixin
from medexplain.db.enums import AuditAction


class AuditLog(UUIDMixin, CreatedAtMixin, Base):
    """
    Audit log entry.

    Attributes:
        id: UUID7 primary key
        user_id: Acting user, or None for system actions
        action: What happened (see AuditAction)
        table_name: Affected table, if any
        record_id: Affected row, if any
        old_data: Row state before the action
        new_data: Row state after the action
        created_at: When the action was logged

    This table is append-only - records should never be updated or deleted.
    """

    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="Acting user (NULL = system)",
    )

    action: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Action performed",
    )

    table_name: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Name of the affected table",
    )

    record_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="UUID of the affected record",
    )

    old_data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    new_data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        Index("ix_audit_logs_created_at", "created_at"),
        Index("ix_audit_logs_table_record", "table_name", "record_id"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog(action={self.action}, table={self.table_name}, record={self.record_id})>"

    @property
    def actor(self) -> str:
        """Acting user id as text, or "system"."""
        return str(self.user_id) if self.user_id else "system"

    # === Factory Methods ===
    @classmethod
    def create_insert(
        cls,
        user_id: uuid.UUID | None,
        table_name: str,
        record_id: uuid.UUID,
        new_data: dict,
    ) -> "AuditLog":
        """Audit entry for a newly created row."""
        return cls(
            user_id=user_id,
            action=AuditAction.CREATE.value,
            table_name=table_name,
            record_id=record_id,
            new_data=new_data,
        )

    @classmethod
    def create_update(
        cls,
        user_id: uuid.UUID | None,
        table_name: str,
        record_id: uuid.UUID,
        old_data: dict,
        new_data: dict,
    ) -> "AuditLog":
        """Audit entry for an updated row, with before/after snapshots."""
        return cls(
            user_id=user_id,
            action=AuditAction.UPDATE.value,
            table_name=table_name,
            record_id=record_id,
            old_data=old_data,
            new_data=new_data,
        )

    @classmethod
    def create_deletion(
        cls,
        user_id: uuid.UUID | None,
        table_name: str,
        record_id: uuid.UUID,
        old_data: dict,
    ) -> "AuditLog":
        """Audit entry for a deleted row; old_data keeps it recoverable."""
        return cls(
            user_id=user_id,
            action=AuditAction.DELETE.value,
            table_name=table_name,
            record_id=record_id,
            old_data=old_data,
        )

    @classmethod
    def create_ingestion_trigger(
        cls,
        user_id: uuid.UUID | None,
        job_id: uuid.UUID,
        job_type: str,
    ) -> "AuditLog":
        """Audit entry for an ingestion webhook trigger."""
        return cls(
            user_id=user_id,
            action=AuditAction.TRIGGER_INGESTION.value,
            table_name="ingestion_jobs",
            record_id=job_id,
            new_data={"job_type": job_type},
        )
