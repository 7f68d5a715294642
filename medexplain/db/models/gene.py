"""
Gene model: canonical gene identity.

Genes are resolved from free text by case-insensitive substring match on
``symbol`` (see medexplain.services.query).
"""

from typing import TYPE_CHECKING

from sqlalchemy import Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medexplain.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from medexplain.db.models.phenotype import Phenotype
    from medexplain.db.models.variant import Variant


class Gene(UUIDMixin, TimestampMixin, Base):
    """
    A pharmacogene.

    Attributes:
        id: UUID7 primary key
        symbol: HGNC symbol (e.g., "CYP2C9")
        name: Full gene name
        description: Free-text description

    Relationships:
        variants: Known variants of this gene
        phenotypes: Metabolizer/function phenotypes of this gene
    """

    symbol: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Gene symbol",
    )

    name: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Full gene name",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    variants: Mapped[list["Variant"]] = relationship(
        "Variant",
        back_populates="gene",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    phenotypes: Mapped[list["Phenotype"]] = relationship(
        "Phenotype",
        back_populates="gene",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_genes_symbol", "symbol"),
    )

    def __repr__(self) -> str:
        return f"<Gene(symbol={self.symbol!r})>"
