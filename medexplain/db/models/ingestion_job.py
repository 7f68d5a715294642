"""
IngestionJob model for tracking external ingestion pipeline runs.

Jobs are created by the admin API when an ingestion webhook acknowledges a
trigger. This service only ever writes the initial PENDING row; the
external pipeline updates status, records_processed and error_message
directly in the database.

Lifecycle:
    PENDING -> RUNNING -> COMPLETED
                      |-> FAILED
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, CreatedAtMixin, UUIDMixin
from medexplain.db.enums import IngestionJobStatus


class IngestionJob(UUIDMixin, CreatedAtMixin, Base):
    """
    A triggered ingestion run.

    Attributes:
        id: UUID7 primary key
        job_type: Pipeline name (e.g., "FDA Ingestion")
        status: pending, running, completed or failed
        started_at: When the trigger was acknowledged
        completed_at: When the pipeline finished
        records_processed: Rows written by the pipeline
        error_message: Failure reason reported by the pipeline
        created_at: Row creation time (lists are newest first)

    Duplicate triggers produce duplicate rows; there is no idempotency key.
    """

    job_type: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Pipeline name",
    )

    status: Mapped[IngestionJobStatus] = mapped_column(
        Enum(
            IngestionJobStatus,
            name="ingestionjobstatus",
            native_enum=False,
            create_constraint=False,
            length=20,
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=IngestionJobStatus.PENDING,
        comment="Current job state",
    )

    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    records_processed: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "records_processed >= 0",
            name="records_processed_non_negative",
        ),
        Index("ix_ingestion_jobs_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<IngestionJob(id={self.id}, type={self.job_type!r}, status={self.status.value})>"

    @property
    def is_terminal(self) -> bool:
        """Check if the pipeline reported a final state."""
        return self.status.is_terminal

    @property
    def duration_seconds(self) -> float | None:
        """
        Pipeline run time in seconds.

        Returns None until the pipeline reports completion.
        """
        if not self.started_at or not self.completed_at:
            return None
        return (self.completed_at - self.started_at).total_seconds()
