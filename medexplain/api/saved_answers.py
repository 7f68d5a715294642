"""Saved answer endpoints. Callers only ever see their own rows."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.api.deps import get_principal
from medexplain.core.access import Principal
from medexplain.db import get_db
from medexplain.schemas import ErrorResponse, ListResponse, SavedAnswerCreate, SavedAnswerResponse
from medexplain.services.saved_answers import SavedAnswerService

router = APIRouter()


@router.get(
    "",
    response_model=ListResponse[SavedAnswerResponse],
    summary="List saved answers",
    description="The caller's saved answers, newest first.",
)
async def list_saved_answers(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[SavedAnswerResponse]:
    saved = await SavedAnswerService(db).list(principal)
    return ListResponse.create(
        items=[SavedAnswerResponse.model_validate(s) for s in saved],
    )


@router.post(
    "",
    response_model=SavedAnswerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save an answer",
    description=(
        "Store a snapshot of a rendered answer. Later changes to reference data "
        "do not alter saved answers."
    ),
)
async def save_answer(
    request: SavedAnswerCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> SavedAnswerResponse:
    saved = await SavedAnswerService(db).save(
        principal,
        drug_name=request.drug_name,
        gene_symbol=request.gene_symbol,
        view_mode=request.view_mode,
        answer=request.answer,
    )
    return SavedAnswerResponse.model_validate(saved)


@router.get(
    "/{saved_answer_id}",
    response_model=SavedAnswerResponse,
    summary="Get a saved answer",
    responses={404: {"model": ErrorResponse}},
)
async def get_saved_answer(
    saved_answer_id: UUID,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> SavedAnswerResponse:
    saved = await SavedAnswerService(db).get(principal, saved_answer_id)
    return SavedAnswerResponse.model_validate(saved)


@router.delete(
    "/{saved_answer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a saved answer",
    description="Idempotent: deleting an absent answer, or one you do not own, is a no-op.",
)
async def delete_saved_answer(
    saved_answer_id: UUID,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await SavedAnswerService(db).delete(principal, saved_answer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
