"""
Drug model: canonical drug identity.

Drugs are resolved from free text by case-insensitive substring match on
``name`` (see medexplain.services.query).
"""

from sqlalchemy import Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, JSONType, TimestampMixin, UUIDMixin


class Drug(UUIDMixin, TimestampMixin, Base):
    """
    A drug known to the reference data store.

    Attributes:
        id: UUID7 primary key
        name: Canonical name (e.g., "Warfarin")
        aliases: Alternative names (brand names, salts)
        description: Free-text description
    """

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Canonical drug name",
    )

    aliases: Mapped[list | None] = mapped_column(
        JSONType,
        nullable=True,
        default=list,
        comment="Alternative names",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    __table_args__ = (
        Index("ix_drugs_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Drug(name={self.name!r})>"
