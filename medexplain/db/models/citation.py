"""Citation model: bibliographic reference backing a guideline."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, CreatedAtMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.guideline import Guideline


class Citation(UUIDMixin, CreatedAtMixin, Base):
    """
    A citation belonging to exactly one guideline.

    Rendered in answers as "{title} - {authors} ({journal}, {year})".
    """

    guideline_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("guidelines.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    authors: Mapped[str | None] = mapped_column(Text, nullable=True)
    journal: Mapped[str | None] = mapped_column(Text, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    doi: Mapped[str | None] = mapped_column(Text, nullable=True)
    pmid: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)

    guideline: Mapped["Guideline"] = relationship("Guideline", back_populates="citations")

    __table_args__ = (
        Index("ix_citations_guideline_id", "guideline_id"),
    )

    def __repr__(self) -> str:
        return f"<Citation(title={self.title!r}, year={self.year})>"

    def format(self) -> str:
        """Render as a one-line reference string."""
        return f"{self.title} - {self.authors} ({self.journal}, {self.year})"
