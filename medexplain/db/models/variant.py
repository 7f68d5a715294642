"""Variant model: a named allele of a gene (read-only reference data)."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.gene import Gene


class Variant(UUIDMixin, TimestampMixin, Base):
    """
    A gene variant.

    Attributes:
        gene_id: Owning gene
        name: Star allele or variant name (e.g., "*3")
        rsid: dbSNP reference SNP id
        allele: Allele notation
        function: Functional annotation (e.g., "No function")
    """

    gene_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("genes.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    rsid: Mapped[str | None] = mapped_column(Text, nullable=True, comment="dbSNP rs id")
    allele: Mapped[str | None] = mapped_column(Text, nullable=True)
    function: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Functional annotation")

    gene: Mapped["Gene"] = relationship("Gene", back_populates="variants")

    __table_args__ = (
        Index("ix_variants_gene_id", "gene_id"),
    )

    def __repr__(self) -> str:
        return f"<Variant(name={self.name!r}, rsid={self.rsid!r})>"
