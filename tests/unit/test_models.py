"""Unit tests for enums and model helpers."""

import uuid
from datetime import UTC, datetime, timedelta

from medexplain.db import (
    AuditAction,
    AuditLog,
    EvidenceLevel,
    IngestionJob,
    IngestionJobStatus,
    IngestionJobType,
    is_valid_evidence_level,
)

# =============================================================================
# Enum Tests
# =============================================================================


class TestEvidenceLevel:
    def test_valid_levels(self) -> None:
        for level in ("High", "Moderate", "Low"):
            assert is_valid_evidence_level(level), f"{level} should be valid"

    def test_invalid_levels(self) -> None:
        for level in ("high", "Strong", "", None):
            assert not is_valid_evidence_level(level), f"{level!r} should be invalid"

    def test_values_in_order(self) -> None:
        assert EvidenceLevel.values() == ["High", "Moderate", "Low"]


class TestIngestionJobEnums:
    def test_job_type_values(self) -> None:
        assert [t.value for t in IngestionJobType] == ["FDA Ingestion", "Gene/Variant Ingestion"]

    def test_terminal_states(self) -> None:
        assert IngestionJobStatus.COMPLETED.is_terminal
        assert IngestionJobStatus.FAILED.is_terminal
        assert not IngestionJobStatus.PENDING.is_terminal
        assert not IngestionJobStatus.RUNNING.is_terminal


# =============================================================================
# Model Helper Tests
# =============================================================================


def test_ingestion_job_duration() -> None:
    started = datetime(2025, 1, 1, tzinfo=UTC)
    job = IngestionJob(
        job_type=IngestionJobType.FDA.value,
        status=IngestionJobStatus.COMPLETED,
        started_at=started,
        completed_at=started + timedelta(seconds=90),
    )
    assert job.is_terminal
    assert job.duration_seconds == 90.0

    pending = IngestionJob(job_type=IngestionJobType.FDA.value, status=IngestionJobStatus.PENDING)
    assert pending.duration_seconds is None


class TestAuditLogFactories:
    def test_deletion_keeps_old_data(self) -> None:
        record_id = uuid.uuid4()
        entry = AuditLog.create_deletion(
            user_id=None,
            table_name="sources",
            record_id=record_id,
            old_data={"name": "CPIC"},
        )
        assert entry.action == AuditAction.DELETE.value
        assert entry.old_data == {"name": "CPIC"}
        assert entry.new_data is None
        assert entry.actor == "system"

    def test_ingestion_trigger(self) -> None:
        user_id, job_id = uuid.uuid4(), uuid.uuid4()
        entry = AuditLog.create_ingestion_trigger(user_id=user_id, job_id=job_id, job_type="FDA Ingestion")
        assert entry.table_name == "ingestion_jobs"
        assert entry.record_id == job_id
        assert entry.actor == str(user_id)
