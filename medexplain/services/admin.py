"""
Admin operations: source CRUD, ingestion triggers, job/audit history, stats.

Every public method starts with ``require_admin(principal)``. Source
mutations and ingestion triggers append an AuditLog entry in the same
transaction as the change itself.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.core.access import Principal, require_admin
from medexplain.core.config import settings
from medexplain.core.errors import NotFound, StorageUnavailable, WebhookFailed
from medexplain.core.logging import get_logger
from medexplain.db.enums import IngestionJobStatus
from medexplain.db.models import AuditLog, Drug, Gene, Guideline, IngestionJob, Source
from medexplain.db.session import transaction
from medexplain.services.webhooks import WebhookClient

logger = get_logger(__name__)

SOURCE_FIELDS = ("name", "url", "description", "is_active")


class AdminService:
    """
    Administrative operations over reference data and ingestion.

    Usage:
        service = AdminService(db)
        source = await service.create_source(principal, name="CPIC")
    """

    def __init__(self, db: AsyncSession, webhook_client: WebhookClient | None = None):
        self.db = db
        self.webhook_client = webhook_client

    # =========================================================================
    # Sources
    # =========================================================================

    async def list_sources(self, principal: Principal) -> list[Source]:
        """All sources, newest first."""
        require_admin(principal)
        stmt = select(Source).order_by(Source.created_at.desc(), Source.id.desc())
        return list((await self._execute(stmt)).scalars().all())

    async def create_source(
        self,
        principal: Principal,
        name: str,
        url: str | None = None,
        description: str | None = None,
        is_active: bool = True,
    ) -> Source:
        require_admin(principal)
        source = Source(name=name, url=url, description=description, is_active=is_active)
        try:
            async with transaction(self.db):
                self.db.add(source)
                await self.db.flush()
                self.db.add(
                    AuditLog.create_insert(
                        user_id=principal.user_id,
                        table_name="sources",
                        record_id=source.id,
                        new_data=source.to_dict(),
                    )
                )
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        logger.info("Source created", source_id=str(source.id), name=name)
        return source

    async def update_source(self, principal: Principal, source_id: UUID, **changes) -> Source:
        """
        Apply a partial update. Keys other than name, url, description and
        is_active are rejected.

        Raises:
            NotFound: Unknown source id
        """
        require_admin(principal)
        unknown = set(changes) - set(SOURCE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown source fields: {sorted(unknown)}")

        source = await self._get_source(source_id)
        old_data = source.to_dict()
        for key, value in changes.items():
            setattr(source, key, value)

        try:
            async with transaction(self.db):
                await self.db.flush()
                self.db.add(
                    AuditLog.create_update(
                        user_id=principal.user_id,
                        table_name="sources",
                        record_id=source.id,
                        old_data=old_data,
                        new_data=source.to_dict(),
                    )
                )
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        logger.info("Source updated", source_id=str(source_id), fields=sorted(changes))
        return source

    async def delete_source(self, principal: Principal, source_id: UUID) -> None:
        """
        Delete a source. Guidelines keep existing with source_id cleared.

        Raises:
            NotFound: Unknown source id
        """
        require_admin(principal)
        source = await self._get_source(source_id)
        old_data = source.to_dict()
        try:
            async with transaction(self.db):
                await self.db.delete(source)
                self.db.add(
                    AuditLog.create_deletion(
                        user_id=principal.user_id,
                        table_name="sources",
                        record_id=source_id,
                        old_data=old_data,
                    )
                )
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        logger.info("Source deleted", source_id=str(source_id))

    async def _get_source(self, source_id: UUID) -> Source:
        source = (await self._execute(select(Source).where(Source.id == source_id))).scalar_one_or_none()
        if source is None:
            raise NotFound(f"Source {source_id} not found")
        return source

    # =========================================================================
    # Ingestion
    # =========================================================================

    async def trigger_ingestion(
        self,
        principal: Principal,
        job_type: str,
        webhook_url: str | None,
    ) -> IngestionJob:
        """
        Fire an ingestion webhook and record a pending job once it is acknowledged.

        No retry and no idempotency key: triggering twice records two jobs.

        Raises:
            WebhookFailed: No URL configured, or the webhook did not acknowledge;
                no job row is written
        """
        require_admin(principal)
        if not webhook_url:
            raise WebhookFailed(f"No webhook configured for {job_type}")

        if self.webhook_client is not None:
            triggered_at = await self.webhook_client.trigger(job_type, webhook_url)
        else:
            async with WebhookClient() as client:
                triggered_at = await client.trigger(job_type, webhook_url)

        job = IngestionJob(
            job_type=job_type,
            status=IngestionJobStatus.PENDING,
            started_at=triggered_at,
        )
        try:
            async with transaction(self.db):
                self.db.add(job)
                await self.db.flush()
                self.db.add(
                    AuditLog.create_ingestion_trigger(
                        user_id=principal.user_id,
                        job_id=job.id,
                        job_type=job_type,
                    )
                )
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        logger.info("Ingestion job recorded", job_id=str(job.id), job_type=job_type)
        return job

    async def list_ingestion_jobs(
        self,
        principal: Principal,
        limit: int | None = None,
    ) -> list[IngestionJob]:
        """Most recent ingestion jobs, newest first."""
        require_admin(principal)
        limit = limit or settings.ingestion_jobs_list_limit
        stmt = (
            select(IngestionJob)
            .order_by(IngestionJob.created_at.desc(), IngestionJob.id.desc())
            .limit(limit)
        )
        return list((await self._execute(stmt)).scalars().all())

    # =========================================================================
    # Audit Log / Stats
    # =========================================================================

    async def list_audit_log(
        self,
        principal: Principal,
        limit: int | None = None,
    ) -> list[AuditLog]:
        """Most recent audit entries, newest first."""
        require_admin(principal)
        limit = limit or settings.audit_log_list_limit
        stmt = (
            select(AuditLog)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
        )
        return list((await self._execute(stmt)).scalars().all())

    async def stats(self, principal: Principal) -> dict[str, int]:
        """Counts of drugs, genes and guidelines."""
        require_admin(principal)
        counts = {}
        for key, model in (
            ("total_drugs", Drug),
            ("total_genes", Gene),
            ("total_guidelines", Guideline),
        ):
            counts[key] = (await self._execute(select(func.count(model.id)))).scalar() or 0
        return counts

    async def _execute(self, stmt):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Admin query failed", error=str(e))
            raise StorageUnavailable(str(e)) from e
