"""
Interaction model: the unit a user query resolves to.

An interaction ties a drug and gene to an optional phenotype and guideline
and carries the recommended action, a summary and free-text evidence.

Several interactions may exist for one (drug, gene) pair. The query flow
picks the most recently updated one (see medexplain.services.query).
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.drug import Drug
    from medexplain.db.models.gene import Gene
    from medexplain.db.models.guideline import Guideline
    from medexplain.db.models.phenotype import Phenotype


class Interaction(UUIDMixin, TimestampMixin, Base):
    """
    A drug-gene interaction.

    Attributes:
        drug_id / gene_id: The resolved pair
        phenotype_id: Phenotype the action applies to (optional)
        guideline_id: Backing guideline (optional)
        action: Recommended action (e.g., "Reduce starting dose")
        summary: Fallback summary when the guideline has none
        evidence: Free-text evidence statement
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

    phenotype_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("phenotypes.id", ondelete="SET NULL"),
        nullable=True,
    )

    guideline_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("guidelines.id", ondelete="SET NULL"),
        nullable=True,
    )

    action: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence: Mapped[str | None] = mapped_column(Text, nullable=True)

    drug: Mapped["Drug"] = relationship("Drug")
    gene: Mapped["Gene"] = relationship("Gene")
    phenotype: Mapped["Phenotype | None"] = relationship("Phenotype")
    guideline: Mapped["Guideline | None"] = relationship("Guideline")

    __table_args__ = (
        Index("ix_interactions_drug_gene", "drug_id", "gene_id"),
    )

    def __repr__(self) -> str:
        return f"<Interaction(drug_id={self.drug_id}, gene_id={self.gene_id}, action={self.action!r})>"
