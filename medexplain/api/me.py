"""Caller identity endpoint."""

from fastapi import APIRouter, Depends

from medexplain.api.deps import get_principal
from medexplain.core.access import Principal
from medexplain.schemas import PrincipalResponse

router = APIRouter()


@router.get(
    "",
    response_model=PrincipalResponse,
    summary="Current principal",
    description="The authenticated user and whether they hold the admin capability.",
)
async def get_me(principal: Principal = Depends(get_principal)) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        email=principal.email,
        is_admin=principal.is_admin,
    )
