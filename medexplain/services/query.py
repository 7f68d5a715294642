"""
Query resolution: free-text drug + gene -> rendered guidance.

Flow for one query:
1. Reserve one slot of the caller's monthly quota (atomic guarded upsert,
   see medexplain.services.usage). QuotaExceeded stops here.
2. Resolve the drug by case-insensitive substring match on Drug.name and
   the gene likewise on Gene.symbol.
3. Pick the interaction for the (drug, gene) pair. When several exist the
   most recently updated wins (ties broken by id, newest first).
4. Load the guideline's citations and render the answer for the view mode.
5. Commit, which charges the reserved slot. Any failure in steps 2-4 rolls
   the reservation back, so only successful queries are counted.

Drug, gene and interaction misses all surface as the same NotFound.
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medexplain.core.access import Principal
from medexplain.core.errors import NotFound, StorageUnavailable
from medexplain.core.logging import get_logger
from medexplain.db.enums import ViewMode
from medexplain.db.models import Citation, Drug, Gene, Guideline, Interaction
from medexplain.services.usage import UsageMeter, UsageSnapshot

logger = get_logger(__name__)

NO_INFORMATION = "No information available."
NOT_AVAILABLE = "N/A"


# =============================================================================
# Rendering
# =============================================================================


def format_citation(citation: Citation) -> str:
    """Render a citation as "{title} - {authors} ({journal}, {year})"."""
    return citation.format()


def render_patient_answer(interaction: Interaction, guideline: Guideline | None) -> str:
    """Patient summary, falling back to the interaction summary."""
    patient_summary = guideline.patient_summary if guideline else None
    return patient_summary or interaction.summary or NO_INFORMATION


def render_clinician_answer(interaction: Interaction, guideline: Guideline | None) -> str:
    """
    Clinician view: main summary followed by labeled lines.

    Sections, in this fixed order and separated by blank lines:
        <clinician summary>
        Action: ...
        Evidence: ...
        Phenotype: ...
        Evidence Level: ...

    Each section falls back to "N/A" on its own.
    """
    clinician_summary = guideline.clinician_summary if guideline else None
    evidence_level = guideline.evidence_level if guideline else None
    phenotype = interaction.phenotype.phenotype if interaction.phenotype else None

    sections = [
        clinician_summary or interaction.summary or NOT_AVAILABLE,
        f"Action: {interaction.action or NOT_AVAILABLE}",
        f"Evidence: {interaction.evidence or NOT_AVAILABLE}",
        f"Phenotype: {phenotype or NOT_AVAILABLE}",
        f"Evidence Level: {evidence_level or NOT_AVAILABLE}",
    ]
    return "\n\n".join(sections)


def render_answer(
    view_mode: ViewMode,
    interaction: Interaction,
    guideline: Guideline | None,
) -> str:
    """Render the answer text for a view mode."""
    if view_mode == ViewMode.CLINICIAN:
        return render_clinician_answer(interaction, guideline)
    return render_patient_answer(interaction, guideline)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class QueryResult:
    """A resolved and rendered answer."""

    drug_name: str
    gene_symbol: str
    view_mode: ViewMode
    answer: str
    citations: list[str] = field(default_factory=list)
    # None when charging the query failed after the answer was produced
    usage: UsageSnapshot | None = None


# =============================================================================
# Service
# =============================================================================


class QueryService:
    """
    Resolves drug/gene questions against the reference data store.

    Usage:
        service = QueryService(db)
        result = await service.resolve(principal, "warf", "CYP2C9", ViewMode.PATIENT)
    """

    def __init__(self, db: AsyncSession, meter: UsageMeter | None = None):
        self.db = db
        self.meter = meter or UsageMeter(db)

    async def resolve(
        self,
        principal: Principal,
        drug_input: str,
        gene_input: str,
        view_mode: ViewMode = ViewMode.PATIENT,
    ) -> QueryResult:
        """
        Answer one query and charge it to the caller's monthly quota.

        Raises:
            QuotaExceeded: Quota used up; nothing else is read or written
            NotFound: Drug, gene or interaction absent
            StorageUnavailable: Database failure
        """
        try:
            usage = await self.meter.reserve(principal)
            drug = await self.resolve_drug(drug_input)
            gene = await self.resolve_gene(gene_input)
            interaction = await self.select_interaction(drug.id, gene.id)
            guideline = interaction.guideline
            citations = await self.citations_for(guideline.id) if guideline else []
        except Exception:
            await self.db.rollback()
            raise

        answer = render_answer(view_mode, interaction, guideline)
        # Snapshot before commit; a rollback below would expire the ORM objects
        drug_name, gene_symbol, interaction_id = drug.name, gene.symbol, interaction.id
        citation_strings = [format_citation(c) for c in citations]

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            # The caller still gets the answer; this query goes uncharged
            logger.warning(
                "Usage increment lost",
                user_id=str(principal.user_id),
                month=usage.month,
                error=str(e),
            )
            await self.db.rollback()
            usage = None

        logger.info(
            "Query resolved",
            drug=drug_name,
            gene=gene_symbol,
            view_mode=view_mode.value,
            interaction_id=str(interaction_id),
            citations=len(citation_strings),
        )

        return QueryResult(
            drug_name=drug_name,
            gene_symbol=gene_symbol,
            view_mode=view_mode,
            answer=answer,
            citations=citation_strings,
            usage=usage,
        )

    async def resolve_drug(self, drug_input: str) -> Drug:
        """Case-insensitive substring match on Drug.name; first by name wins."""
        term = drug_input.strip()
        if not term:
            raise NotFound()
        stmt = (
            select(Drug)
            .where(Drug.name.icontains(term, autoescape=True))
            .order_by(Drug.name, Drug.id)
            .limit(1)
        )
        drug = await self._first(stmt)
        if drug is None:
            logger.info("Drug not found", drug_input=drug_input)
            raise NotFound()
        return drug

    async def resolve_gene(self, gene_input: str) -> Gene:
        """Case-insensitive substring match on Gene.symbol; first by symbol wins."""
        term = gene_input.strip()
        if not term:
            raise NotFound()
        stmt = (
            select(Gene)
            .where(Gene.symbol.icontains(term, autoescape=True))
            .order_by(Gene.symbol, Gene.id)
            .limit(1)
        )
        gene = await self._first(stmt)
        if gene is None:
            logger.info("Gene not found", gene_input=gene_input)
            raise NotFound()
        return gene

    async def select_interaction(self, drug_id: UUID, gene_id: UUID) -> Interaction:
        """Most recently updated interaction for the pair, with guideline and phenotype loaded."""
        stmt = (
            select(Interaction)
            .options(
                selectinload(Interaction.guideline).selectinload(Guideline.source),
                selectinload(Interaction.phenotype),
            )
            .where(
                Interaction.drug_id == drug_id,
                Interaction.gene_id == gene_id,
            )
            .order_by(Interaction.updated_at.desc(), Interaction.id.desc())
            .limit(1)
        )
        interaction = await self._first(stmt)
        if interaction is None:
            logger.info("No interaction for pair", drug_id=str(drug_id), gene_id=str(gene_id))
            raise NotFound()
        return interaction

    async def citations_for(self, guideline_id: UUID) -> list[Citation]:
        """All citations of a guideline, oldest first."""
        stmt = (
            select(Citation)
            .where(Citation.guideline_id == guideline_id)
            .order_by(Citation.created_at, Citation.id)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e
        return list(result.scalars().all())

    async def _first(self, stmt):
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Reference lookup failed", error=str(e))
            raise StorageUnavailable(str(e)) from e
        return result.scalars().first()
