"""Evidence browser endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.api.deps import get_principal
from medexplain.core.access import Principal
from medexplain.db import EvidenceLevel, get_db
from medexplain.schemas import (
    CitationResponse,
    EvidenceFilters,
    GuidelineResponse,
    ListResponse,
)
from medexplain.services.evidence import EvidenceService

router = APIRouter()


@router.get(
    "/guidelines",
    response_model=ListResponse[GuidelineResponse],
    summary="Browse guidelines",
    description="Guidelines with drug, gene, source and citations, newest first.",
)
async def list_guidelines(
    search: str | None = Query(default=None, max_length=200, description="Drug, gene or recommendation text"),
    drug: str | None = Query(default=None, description="Exact drug name"),
    gene: str | None = Query(default=None, description="Exact gene symbol"),
    evidence_level: EvidenceLevel | None = Query(default=None, description="Evidence level"),
    _principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[GuidelineResponse]:
    views = await EvidenceService(db).list_guidelines(
        search=search,
        drug=drug,
        gene=gene,
        evidence_level=evidence_level.value if evidence_level else None,
    )
    items = [
        GuidelineResponse(
            id=v.id,
            drug_name=v.drug_name,
            gene_symbol=v.gene_symbol,
            source_name=v.source_name,
            recommendation=v.recommendation,
            evidence_level=v.evidence_level,
            patient_summary=v.patient_summary,
            clinician_summary=v.clinician_summary,
            citations=[CitationResponse.model_validate(c) for c in v.citations],
        )
        for v in views
    ]
    return ListResponse.create(items=items)


@router.get(
    "/filters",
    response_model=EvidenceFilters,
    summary="Evidence filter options",
    description="Sorted drug names and gene symbols for the browser's filters.",
)
async def get_filters(
    _principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> EvidenceFilters:
    options = await EvidenceService(db).filter_options()
    return EvidenceFilters(
        drugs=options.drugs,
        genes=options.genes,
        evidence_levels=options.evidence_levels,
    )
