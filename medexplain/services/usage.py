"""
Usage metering: at most N successful queries per user per calendar month.

The check and the increment are a single guarded upsert:

    INSERT INTO usage_monthly (user_id, month, query_count) VALUES (:u, :m, 1)
    ON CONFLICT (user_id, month)
    DO UPDATE SET query_count = usage_monthly.query_count + 1
    WHERE usage_monthly.query_count < :quota
    RETURNING query_count

No row comes back once the quota is used up, and nothing is written. The
statement runs inside the caller's transaction: the conflicting row stays
locked until commit/rollback, so concurrent queries from the same user are
serialized and cannot both take the last slot. Callers commit the
reservation only after the answer is produced and roll it back otherwise,
so failed queries are never charged.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid6 import uuid7

from medexplain.core.access import Principal, owned_by
from medexplain.core.config import settings
from medexplain.core.errors import QuotaExceeded, StorageUnavailable
from medexplain.core.logging import get_logger
from medexplain.db.base import utc_now
from medexplain.db.models import UsageMonthly

logger = get_logger(__name__)


def current_month(now: datetime | None = None) -> str:
    """Calendar month key "YYYY-MM" in UTC."""
    now = now or datetime.now(UTC)
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return now.strftime("%Y-%m")


@dataclass
class UsageSnapshot:
    """Usage for one user and month."""

    month: str
    query_count: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.query_count)

    @property
    def exhausted(self) -> bool:
        return self.query_count >= self.limit


class UsageMeter:
    """
    Per-user monthly query counter.

    Usage:
        meter = UsageMeter(db)
        usage = await meter.reserve(principal)   # raises QuotaExceeded
        ...                                       # produce the answer
        await db.commit()                         # charge it
    """

    def __init__(self, db: AsyncSession, quota: int | None = None):
        self.db = db
        self.quota = quota if quota is not None else settings.monthly_query_quota

    def _insert(self):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(UsageMonthly)
        return postgresql.insert(UsageMonthly)

    async def reserve(self, principal: Principal, month: str | None = None) -> UsageSnapshot:
        """
        Atomically check the quota and take one slot.

        Raises:
            QuotaExceeded: The user already used the whole quota this month
            StorageUnavailable: The upsert failed
        """
        month = month or current_month()
        now = utc_now()
        insert = self._insert()
        stmt = (
            insert.values(
                id=uuid7(),
                user_id=principal.user_id,
                month=month,
                query_count=1,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=[UsageMonthly.user_id, UsageMonthly.month],
                set_={
                    "query_count": UsageMonthly.query_count + 1,
                    "updated_at": now,
                },
                where=UsageMonthly.query_count < self.quota,
            )
            .returning(UsageMonthly.query_count)
        )

        try:
            result = await self.db.execute(stmt)
            count = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Usage reservation failed", error=str(e))
            raise StorageUnavailable(str(e)) from e

        if count is None:
            logger.warning(
                "Monthly quota exceeded",
                user_id=str(principal.user_id),
                month=month,
                limit=self.quota,
            )
            raise QuotaExceeded(limit=self.quota, month=month)

        return UsageSnapshot(month=month, query_count=count, limit=self.quota)

    async def get(self, principal: Principal, month: str | None = None) -> UsageSnapshot:
        """Current usage of the caller; zero when no row exists yet."""
        month = month or current_month()
        try:
            result = await self.db.execute(
                select(UsageMonthly.query_count).where(
                    owned_by(UsageMonthly, principal),
                    UsageMonthly.month == month,
                )
            )
            count = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e
        return UsageSnapshot(month=month, query_count=count or 0, limit=self.quota)
