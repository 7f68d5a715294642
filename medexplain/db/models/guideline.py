"""
Guideline model: a source-backed dosing recommendation for a drug/gene pair.

Guidelines carry separate patient-facing and clinician-facing summaries,
which the query flow picks between by view mode.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.citation import Citation
    from medexplain.db.models.drug import Drug
    from medexplain.db.models.gene import Gene
    from medexplain.db.models.source import Source


class Guideline(UUIDMixin, TimestampMixin, Base):
    """
    A clinical guideline.

    Attributes:
        drug_id / gene_id: The pair this guideline covers
        source_id: Publishing source (nullable; cleared when the source is deleted)
        recommendation: Recommendation text
        evidence_level: "High", "Moderate" or "Low" (see EvidenceLevel)
        patient_summary: Plain-language summary
        clinician_summary: Clinical summary

    Relationships:
        citations: Bibliographic references, deleted with the guideline
    """

    drug_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("drugs.id", ondelete="CASCADE"),
        nullable=False,
    )

    gene_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("genes.id", ondelete="CASCADE"),
        nullable=False,
    )

    source_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sources.id", ondelete="SET NULL"),
        nullable=True,
    )

    recommendation: Mapped[str | None] = mapped_column(Text, nullable=True)

    evidence_level: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="High / Moderate / Low",
    )

    patient_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    clinician_summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    drug: Mapped["Drug"] = relationship("Drug")
    gene: Mapped["Gene"] = relationship("Gene")
    source: Mapped["Source | None"] = relationship("Source")

    citations: Mapped[list["Citation"]] = relationship(
        "Citation",
        back_populates="guideline",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Citation.created_at",
    )

    __table_args__ = (
        Index("ix_guidelines_drug_gene", "drug_id", "gene_id"),
    )

    def __repr__(self) -> str:
        return f"<Guideline(id={self.id}, evidence_level={self.evidence_level!r})>"
