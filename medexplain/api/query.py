"""Query and usage endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.api.deps import get_principal
from medexplain.core.access import Principal
from medexplain.core.logging import get_logger
from medexplain.db import get_db
from medexplain.schemas import ErrorResponse, QueryRequest, QueryResponse, UsageResponse
from medexplain.services.query import QueryService
from medexplain.services.usage import UsageMeter, UsageSnapshot

logger = get_logger(__name__)

router = APIRouter()


def usage_to_response(usage: UsageSnapshot) -> UsageResponse:
    return UsageResponse(month=usage.month, query_count=usage.query_count, limit=usage.limit)


@router.post(
    "/query",
    response_model=QueryResponse,
    summary="Ask a drug-gene question",
    description=(
        "Resolve a drug name and gene symbol (case-insensitive substring match) "
        "to the matching interaction and render a patient or clinician answer. "
        "Each successful query counts against the monthly quota."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Drug, gene or interaction not in database"},
        429: {"model": ErrorResponse, "description": "Monthly quota reached"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
)
async def ask(
    request: QueryRequest,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> QueryResponse:
    """Answer a drug-gene question."""
    result = await QueryService(db).resolve(
        principal,
        drug_input=request.drug,
        gene_input=request.gene,
        view_mode=request.view_mode,
    )
    return QueryResponse(
        drug_name=result.drug_name,
        gene_symbol=result.gene_symbol,
        view_mode=result.view_mode,
        answer=result.answer,
        citations=result.citations,
        usage=usage_to_response(result.usage) if result.usage else None,
    )


@router.get(
    "/usage",
    response_model=UsageResponse,
    summary="Current month usage",
    description="Number of queries used this calendar month (UTC) and the monthly limit.",
)
async def get_usage(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> UsageResponse:
    """Get the caller's usage for the current month."""
    return usage_to_response(await UsageMeter(db).get(principal))
