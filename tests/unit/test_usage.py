"""Unit tests for monthly usage metering."""

import asyncio
from datetime import UTC, datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from medexplain.core.errors import QuotaExceeded
from medexplain.db import Base, UsageMonthly
from medexplain.services.usage import UsageMeter, UsageSnapshot, current_month


class TestCurrentMonth:
    def test_format(self) -> None:
        assert current_month(datetime(2025, 3, 9, tzinfo=UTC)) == "2025-03"

    def test_uses_utc(self) -> None:
        # 2025-01-31 23:30 at UTC-5 is already February in UTC
        local = datetime(2025, 1, 31, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert current_month(local) == "2025-02"


def test_snapshot_remaining() -> None:
    assert UsageSnapshot(month="2025-01", query_count=48, limit=50).remaining == 2
    assert UsageSnapshot(month="2025-01", query_count=50, limit=50).exhausted is True


class TestUsageMeter:
    async def test_first_reservation_creates_row(self, db_session, user) -> None:
        meter = UsageMeter(db_session, quota=50)

        usage = await meter.reserve(user, month="2025-01")
        await db_session.commit()

        assert usage.query_count == 1
        assert (await meter.get(user, month="2025-01")).query_count == 1

    async def test_one_row_per_month(self, db_session, user) -> None:
        meter = UsageMeter(db_session, quota=50)
        for _ in range(3):
            await meter.reserve(user, month="2025-01")
        await meter.reserve(user, month="2025-02")
        await db_session.commit()

        rows = (await db_session.execute(select(UsageMonthly))).scalars().all()
        assert sorted((r.month, r.query_count) for r in rows) == [("2025-01", 3), ("2025-02", 1)]

    async def test_quota_exceeded_after_limit(self, db_session, user) -> None:
        meter = UsageMeter(db_session)
        for _ in range(50):
            await meter.reserve(user, month="2025-01")
        await db_session.commit()

        with pytest.raises(QuotaExceeded) as exc_info:
            await meter.reserve(user, month="2025-01")
        await db_session.rollback()

        assert exc_info.value.limit == 50
        assert "monthly limit of 50 queries" in exc_info.value.message
        assert (await meter.get(user, month="2025-01")).query_count == 50

    async def test_rolled_back_reservation_is_not_charged(self, db_session, user) -> None:
        meter = UsageMeter(db_session, quota=5)
        await meter.reserve(user, month="2025-01")
        await db_session.rollback()

        assert (await meter.get(user, month="2025-01")).query_count == 0

    async def test_users_are_metered_separately(self, db_session, user, other_user) -> None:
        meter = UsageMeter(db_session, quota=1)
        await meter.reserve(user, month="2025-01")
        await meter.reserve(other_user, month="2025-01")
        await db_session.commit()

        count = await db_session.execute(select(func.count(UsageMonthly.id)))
        assert count.scalar() == 2

    async def test_get_without_row(self, db_session, user) -> None:
        usage = await UsageMeter(db_session, quota=7).get(user, month="2030-12")
        assert usage == UsageSnapshot(month="2030-12", query_count=0, limit=7)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Sessions on separate connections to one file-backed SQLite database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'usage.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


class TestConcurrentReservations:
    async def test_last_slot_taken_once(self, file_session_factory, user) -> None:
        async def reserve_and_commit():
            async with file_session_factory() as session:
                snapshot = await UsageMeter(session, quota=1).reserve(user)
                await session.commit()
                return snapshot

        results = await asyncio.gather(
            reserve_and_commit(),
            reserve_and_commit(),
            return_exceptions=True,
        )

        succeeded = [r for r in results if isinstance(r, UsageSnapshot)]
        refused = [r for r in results if isinstance(r, QuotaExceeded)]
        assert len(succeeded) == 1, results
        assert len(refused) == 1, results
        assert succeeded[0].query_count == 1

        async with file_session_factory() as session:
            assert (await UsageMeter(session, quota=1).get(user)).query_count == 1
            rows = await session.scalar(select(func.count(UsageMonthly.id)))
        assert rows == 1
