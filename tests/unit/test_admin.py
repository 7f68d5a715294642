"""Unit tests for admin operations and the ingestion webhook client."""

import json
import uuid

import httpx
import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from medexplain.core.errors import Forbidden, NotFound, WebhookFailed
from medexplain.db import AuditAction, AuditLog, Guideline, IngestionJob, IngestionJobStatus
from medexplain.schemas import SourceUpdate
from medexplain.services.admin import AdminService
from medexplain.services.webhooks import WebhookClient

FDA = "FDA Ingestion"
HOOK_URL = "http://hooks.test/fda"


async def audit_entries(db_session) -> list[AuditLog]:
    result = await db_session.execute(select(AuditLog).order_by(AuditLog.created_at, AuditLog.id))
    return list(result.scalars().all())


async def job_count(db_session) -> int:
    return (await db_session.execute(select(func.count(IngestionJob.id)))).scalar()


class TestSources:
    async def test_create_writes_audit_entry(self, db_session, admin) -> None:
        source = await AdminService(db_session).create_source(admin, name="PharmGKB")

        [entry] = await audit_entries(db_session)
        assert entry.action == AuditAction.CREATE.value
        assert entry.table_name == "sources"
        assert entry.record_id == source.id
        assert entry.user_id == admin.user_id
        assert entry.new_data["name"] == "PharmGKB"
        assert entry.new_data["is_active"] is True

    async def test_update_records_before_and_after(self, db_session, admin) -> None:
        service = AdminService(db_session)
        source = await service.create_source(admin, name="PharmGKB")

        updated = await service.update_source(admin, source.id, is_active=False)

        assert updated.is_active is False
        entry = (await audit_entries(db_session))[-1]
        assert entry.action == AuditAction.UPDATE.value
        assert entry.old_data["is_active"] is True
        assert entry.new_data["is_active"] is False

    async def test_update_rejects_unknown_fields(self, db_session, admin) -> None:
        service = AdminService(db_session)
        source = await service.create_source(admin, name="PharmGKB")
        with pytest.raises(ValueError):
            await service.update_source(admin, source.id, id="nope")

    async def test_delete_keeps_guidelines(self, db_session, admin, reference_data) -> None:
        source = reference_data["source"]

        await AdminService(db_session).delete_source(admin, source.id)

        source_id = await db_session.scalar(
            select(Guideline.source_id).where(Guideline.id == reference_data["guideline"].id)
        )
        assert source_id is None
        entry = (await audit_entries(db_session))[-1]
        assert entry.action == AuditAction.DELETE.value
        assert entry.old_data["name"] == "CPIC"

    async def test_unknown_source(self, db_session, admin) -> None:
        with pytest.raises(NotFound):
            await AdminService(db_session).delete_source(admin, uuid.uuid4())

    async def test_list_newest_first(self, db_session, admin) -> None:
        service = AdminService(db_session)
        first = await service.create_source(admin, name="A")
        second = await service.create_source(admin, name="B")
        assert [s.id for s in await service.list_sources(admin)] == [second.id, first.id]


class TestAdminOnly:
    async def test_non_admin_rejected(self, db_session, user) -> None:
        service = AdminService(db_session)

        with pytest.raises(Forbidden):
            await service.create_source(user, name="Nope")
        with pytest.raises(Forbidden):
            await service.list_ingestion_jobs(user)
        with pytest.raises(Forbidden):
            await service.list_audit_log(user)
        with pytest.raises(Forbidden):
            await service.trigger_ingestion(user, FDA, HOOK_URL)

        assert await audit_entries(db_session) == []


class TestTriggerIngestion:
    async def test_acknowledged_trigger_records_pending_job(self, db_session, admin, webhook_stub) -> None:
        async with webhook_stub.client() as client:
            job = await AdminService(db_session, webhook_client=client).trigger_ingestion(
                admin, FDA, HOOK_URL
            )

        [request] = webhook_stub.requests
        assert str(request.url) == HOOK_URL
        payload = json.loads(request.content)
        assert payload["job_type"] == FDA
        assert "triggered_at" in payload

        assert job.status == IngestionJobStatus.PENDING
        assert job.job_type == FDA
        assert job.started_at is not None

        entry = (await audit_entries(db_session))[-1]
        assert entry.action == AuditAction.TRIGGER_INGESTION.value
        assert entry.record_id == job.id

    async def test_rejected_trigger_writes_nothing(self, db_session, admin, webhook_stub) -> None:
        webhook_stub.status_code = 500

        async with webhook_stub.client() as client:
            with pytest.raises(WebhookFailed):
                await AdminService(db_session, webhook_client=client).trigger_ingestion(
                    admin, FDA, HOOK_URL
                )

        assert await job_count(db_session) == 0
        assert await audit_entries(db_session) == []

    async def test_unreachable_webhook(self, db_session, admin, webhook_stub) -> None:
        webhook_stub.error = httpx.ConnectError("connection refused")

        async with webhook_stub.client() as client:
            with pytest.raises(WebhookFailed):
                await AdminService(db_session, webhook_client=client).trigger_ingestion(
                    admin, FDA, HOOK_URL
                )
        assert await job_count(db_session) == 0

    async def test_missing_webhook_url(self, db_session, admin) -> None:
        with pytest.raises(WebhookFailed):
            await AdminService(db_session).trigger_ingestion(admin, FDA, None)

    async def test_duplicate_triggers_record_two_jobs(self, db_session, admin, webhook_stub) -> None:
        webhook_stub.status_code = 202
        async with webhook_stub.client() as client:
            service = AdminService(db_session, webhook_client=client)
            await service.trigger_ingestion(admin, FDA, HOOK_URL)
            await service.trigger_ingestion(admin, FDA, HOOK_URL)

        jobs = await AdminService(db_session).list_ingestion_jobs(admin)
        assert len(jobs) == 2
        assert len(webhook_stub.requests) == 2


class TestListings:
    async def test_ingestion_jobs_newest_first_and_limited(self, db_session, admin) -> None:
        jobs = [IngestionJob(job_type=FDA, status=IngestionJobStatus.COMPLETED) for _ in range(3)]
        for job in jobs:
            db_session.add(job)
            await db_session.flush()
        await db_session.commit()

        listed = await AdminService(db_session).list_ingestion_jobs(admin, limit=2)
        assert [j.id for j in listed] == [jobs[2].id, jobs[1].id]

    async def test_audit_log_newest_first(self, db_session, admin) -> None:
        service = AdminService(db_session)
        await service.create_source(admin, name="A")
        await service.create_source(admin, name="B")

        entries = await service.list_audit_log(admin)
        assert [e.new_data["name"] for e in entries] == ["B", "A"]

    async def test_stats(self, db_session, admin, reference_data) -> None:
        stats = await AdminService(db_session).stats(admin)
        assert stats == {"total_drugs": 2, "total_genes": 2, "total_guidelines": 1}


async def test_webhook_client_requires_context_manager() -> None:
    with pytest.raises(RuntimeError):
        await WebhookClient().trigger(FDA, HOOK_URL)


class TestSourceUpdateSchema:
    def test_omitted_fields_are_unset(self) -> None:
        update = SourceUpdate(url=None)
        assert update.model_dump(exclude_unset=True) == {"url": None}

    @pytest.mark.parametrize("field", ["name", "is_active"])
    def test_null_rejected_for_required_columns(self, field) -> None:
        with pytest.raises(ValidationError):
            SourceUpdate.model_validate({field: None})
