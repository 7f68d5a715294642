"""Phenotype model: a gene-level phenotype such as "Poor Metabolizer"."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.gene import Gene


class Phenotype(UUIDMixin, TimestampMixin, Base):
    """
    A phenotype belonging to exactly one gene.

    Attributes:
        gene_id: Owning gene
        phenotype: Phenotype label
        description: Free-text description
    """

    gene_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("genes.id", ondelete="CASCADE"),
        nullable=False,
    )

    phenotype: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Phenotype label",
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    gene: Mapped["Gene"] = relationship("Gene", back_populates="phenotypes")

    __table_args__ = (
        Index("ix_phenotypes_gene_id", "gene_id"),
    )

    def __repr__(self) -> str:
        return f"<Phenotype(phenotype={self.phenotype!r})>"
