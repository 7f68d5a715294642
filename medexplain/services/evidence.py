"""
Evidence browser: guidelines with their drug, gene, source and citations.

Readable by any authenticated principal. Filters combine with AND:
- search: case-insensitive substring of drug name, gene symbol or
  recommendation
- drug / gene: exact drug name / gene symbol
- evidence_level: exact evidence level
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medexplain.core.errors import StorageUnavailable
from medexplain.core.logging import get_logger
from medexplain.db.enums import EvidenceLevel
from medexplain.db.models import Citation, Drug, Gene, Guideline

logger = get_logger(__name__)


@dataclass
class GuidelineView:
    """A guideline flattened for display."""

    id: UUID
    drug_name: str
    gene_symbol: str
    source_name: str | None
    recommendation: str | None
    evidence_level: str | None
    patient_summary: str | None
    clinician_summary: str | None
    citations: list[Citation] = field(default_factory=list)

    @classmethod
    def from_guideline(cls, guideline: Guideline) -> "GuidelineView":
        return cls(
            id=guideline.id,
            drug_name=guideline.drug.name,
            gene_symbol=guideline.gene.symbol,
            source_name=guideline.source.name if guideline.source else None,
            recommendation=guideline.recommendation,
            evidence_level=guideline.evidence_level,
            patient_summary=guideline.patient_summary,
            clinician_summary=guideline.clinician_summary,
            citations=list(guideline.citations),
        )


@dataclass
class FilterOptions:
    """Distinct values for the browser's filter dropdowns."""

    drugs: list[str]
    genes: list[str]
    evidence_levels: list[str]


class EvidenceService:
    """Read-only access to guidelines for the evidence browser."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_guidelines(
        self,
        search: str | None = None,
        drug: str | None = None,
        gene: str | None = None,
        evidence_level: str | None = None,
    ) -> list[GuidelineView]:
        """Guidelines matching all given filters, newest first."""
        stmt = (
            select(Guideline)
            .join(Drug, Guideline.drug_id == Drug.id)
            .join(Gene, Guideline.gene_id == Gene.id)
            .options(
                selectinload(Guideline.drug),
                selectinload(Guideline.gene),
                selectinload(Guideline.source),
                selectinload(Guideline.citations),
            )
        )

        if search and search.strip():
            term = search.strip()
            stmt = stmt.where(
                or_(
                    Drug.name.icontains(term, autoescape=True),
                    Gene.symbol.icontains(term, autoescape=True),
                    Guideline.recommendation.icontains(term, autoescape=True),
                )
            )
        if drug:
            stmt = stmt.where(Drug.name == drug)
        if gene:
            stmt = stmt.where(Gene.symbol == gene)
        if evidence_level:
            stmt = stmt.where(Guideline.evidence_level == evidence_level)

        stmt = stmt.order_by(Guideline.created_at.desc(), Guideline.id.desc())

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Guideline listing failed", error=str(e))
            raise StorageUnavailable(str(e)) from e

        return [GuidelineView.from_guideline(g) for g in result.scalars().all()]

    async def filter_options(self) -> FilterOptions:
        """Sorted drug names and gene symbols."""
        try:
            drugs = await self.db.execute(select(Drug.name).order_by(Drug.name))
            genes = await self.db.execute(select(Gene.symbol).order_by(Gene.symbol))
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        return FilterOptions(
            drugs=list(drugs.scalars().all()),
            genes=list(genes.scalars().all()),
            evidence_levels=EvidenceLevel.values(),
        )
