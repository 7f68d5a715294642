"""
Source model: provenance of reference data (FDA, CPIC, PharmGKB, ...).

Sources have an independent lifecycle. Guidelines reference them, and
deleting a source leaves its guidelines in place with source_id cleared.
"""

from sqlalchemy import Boolean, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, TimestampMixin, UUIDMixin


class Source(UUIDMixin, TimestampMixin, Base):
    """
    A reference data source.

    Attributes:
        id: UUID7 primary key
        name: Display name (e.g., "CPIC")
        url: Reference URL
        description: Free-text description
        is_active: Whether the source is currently used for ingestion
        created_at / updated_at: Timestamps

    Only administrators may create, update or delete sources.
    """

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Source display name",
    )

    url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Reference URL",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        comment="Whether the source is active",
    )

    def __repr__(self) -> str:
        return f"<Source(name={self.name!r}, active={self.is_active})>"
