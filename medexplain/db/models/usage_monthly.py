"""
UsageMonthly model: per-user query counter for one calendar month.

Invariant: at most one row per (user_id, month), enforced by a unique
constraint. The counter is only ever changed through the guarded upsert in
medexplain.services.usage.
"""

import uuid

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, TimestampMixin, UUIDMixin


class UsageMonthly(UUIDMixin, TimestampMixin, Base):
    """
    Monthly usage counter.

    Attributes:
        user_id: Owning user
        month: Calendar month in UTC, "YYYY-MM"
        query_count: Successful queries this month
    """

    __tablename__ = "usage_monthly"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        comment="Owning user id",
    )

    month: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        comment="Calendar month YYYY-MM (UTC)",
    )

    query_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "month", name="uq_usage_monthly_user_month"),
        CheckConstraint("query_count >= 0", name="query_count_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<UsageMonthly(user_id={self.user_id}, month={self.month}, count={self.query_count})>"
