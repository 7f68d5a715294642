"""
Admin endpoints.

Every route depends on ``get_admin_principal``; non-admins get 403 before
any handler code runs. The services re-check the capability themselves.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.api.deps import get_admin_principal, get_webhook_client
from medexplain.core.access import Principal, list_admins
from medexplain.core.config import settings
from medexplain.core.logging import get_logger
from medexplain.db import get_db
from medexplain.schemas import (
    AppAdminResponse,
    AuditLogResponse,
    ErrorResponse,
    IngestionJobResponse,
    IngestionTriggerRequest,
    ListResponse,
    ReferenceStats,
    SourceCreate,
    SourceResponse,
    SourceUpdate,
)
from medexplain.services.admin import AdminService
from medexplain.services.webhooks import WebhookClient

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Sources
# =============================================================================


@router.get(
    "/sources",
    response_model=ListResponse[SourceResponse],
    summary="List sources",
)
async def list_sources(
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[SourceResponse]:
    sources = await AdminService(db).list_sources(principal)
    return ListResponse.create(items=[SourceResponse.model_validate(s) for s in sources])


@router.post(
    "/sources",
    response_model=SourceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a source",
)
async def create_source(
    request: SourceCreate,
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> SourceResponse:
    source = await AdminService(db).create_source(
        principal,
        name=request.name,
        url=request.url,
        description=request.description,
        is_active=request.is_active,
    )
    return SourceResponse.model_validate(source)


@router.patch(
    "/sources/{source_id}",
    response_model=SourceResponse,
    summary="Update a source",
    responses={404: {"model": ErrorResponse}},
)
async def update_source(
    source_id: UUID,
    request: SourceUpdate,
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> SourceResponse:
    source = await AdminService(db).update_source(
        principal,
        source_id,
        **request.model_dump(exclude_unset=True),
    )
    return SourceResponse.model_validate(source)


@router.delete(
    "/sources/{source_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a source",
    responses={404: {"model": ErrorResponse}},
)
async def delete_source(
    source_id: UUID,
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await AdminService(db).delete_source(principal, source_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Ingestion
# =============================================================================


@router.get(
    "/jobs",
    response_model=ListResponse[IngestionJobResponse],
    summary="Recent ingestion jobs",
    description="Most recent ingestion jobs, newest first.",
)
async def list_jobs(
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[IngestionJobResponse]:
    jobs = await AdminService(db).list_ingestion_jobs(principal)
    return ListResponse.create(
        items=[IngestionJobResponse.model_validate(j) for j in jobs],
        limit=settings.ingestion_jobs_list_limit,
    )


@router.post(
    "/jobs/trigger",
    response_model=IngestionJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Trigger an ingestion pipeline",
    description=(
        "POST to the configured webhook for the job type. A pending job is "
        "recorded only after the webhook acknowledges."
    ),
    responses={502: {"model": ErrorResponse, "description": "Webhook failed"}},
)
async def trigger_job(
    request: IngestionTriggerRequest,
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
    webhook_client: WebhookClient = Depends(get_webhook_client),
) -> IngestionJobResponse:
    job_type = request.job_type.value
    job = await AdminService(db, webhook_client=webhook_client).trigger_ingestion(
        principal,
        job_type=job_type,
        webhook_url=settings.ingestion_webhooks.get(job_type),
    )
    return IngestionJobResponse.model_validate(job)


# =============================================================================
# Audit Log / Stats
# =============================================================================


@router.get(
    "/audit-log",
    response_model=ListResponse[AuditLogResponse],
    summary="Recent audit entries",
)
async def list_audit_log(
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[AuditLogResponse]:
    entries = await AdminService(db).list_audit_log(principal)
    return ListResponse.create(
        items=[AuditLogResponse.model_validate(e) for e in entries],
        limit=settings.audit_log_list_limit,
    )


@router.get(
    "/stats",
    response_model=ReferenceStats,
    summary="Reference data counts",
)
async def get_stats(
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> ReferenceStats:
    return ReferenceStats(**await AdminService(db).stats(principal))


# =============================================================================
# Admins
# =============================================================================



@router.get(
    "/admins",
    response_model=ListResponse[AppAdminResponse],
    summary="List administrators",
)
async def get_admins(
    principal: Principal = Depends(get_admin_principal),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[AppAdminResponse]:
    admins = await list_admins(db, principal)
    return ListResponse.create(items=[AppAdminResponse.model_validate(a) for a in admins])
