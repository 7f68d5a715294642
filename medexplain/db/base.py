"""
SQLAlchemy Base Configuration and Mixins.

This module provides:
- Async engine and session factory configuration
- Base declarative class for all models
- Reusable mixins (UUID7 primary key, timestamps)
- Portable column types (PostgreSQL in production, SQLite in tests)

All models in this project should inherit from `Base` and use the provided
mixins for consistency.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, DateTime, MetaData, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncAttrs, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from uuid6 import uuid7

from medexplain.core.config import settings

# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

# Naming convention for database constraints
# Keeps index/constraint names stable for Alembic across environments
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Async database engine
# - pool_pre_ping: Validates connections before use (handles stale connections)
# - echo: Logs SQL statements when in development mode
engine = create_async_engine(
    settings.db_url,
    echo=settings.is_development and settings.api_debug,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

# Async session factory
# - expire_on_commit=False: Objects remain accessible after commit
# - autoflush=False: Writes happen only when explicitly flushed/committed
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
)


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(UTC)


# =============================================================================
# BASE CLASS
# =============================================================================

class Base(AsyncAttrs, DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Features:
    - AsyncAttrs: Enables `await` on lazy-loaded relationships
    - DeclarativeBase: Modern SQLAlchemy 2.0 declarative base
    - Custom metadata with naming conventions
    - Automatic __tablename__ generation from class name

    Example:
        class Drug(Base):
            # __tablename__ automatically set to "drugs"
            name: Mapped[str] = mapped_column(Text)
    """

    metadata = metadata

    __name__: str

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """
        Automatically generate table name from class name.

        Converts CamelCase to snake_case and pluralizes:
        - SavedAnswer -> saved_answers
        - AppAdmin -> app_admins
        - IngestionJob -> ingestion_jobs

        Models whose name does not pluralize cleanly set __tablename__.
        """
        name = cls.__name__
        snake_case = "".join(
            f"_{char.lower()}" if char.isupper() and i > 0 else char.lower()
            for i, char in enumerate(name)
        )
        if snake_case.endswith("y"):
            return snake_case[:-1] + "ies"
        elif snake_case.endswith("s"):
            return snake_case + "es"
        else:
            return snake_case + "s"

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to a JSON-safe dictionary.

        Used for audit log snapshots (old_data/new_data).

        Handle special types:
        - UUID -> string
        - datetime -> ISO format string
        - Enum -> value
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, uuid.UUID):
                value = str(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            result[column.name] = value
        return result


# =============================================================================
# MIXINS
# =============================================================================

class UUIDMixin:
    """
    Mixin that provides a UUID7 primary key.

    UUID7 is time-ordered, so `id DESC` doubles as a newest-first tie-break.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid7,
        sort_order=-100,
    )


class TimestampMixin:
    """
    Mixin that provides created_at and updated_at timestamps.

    Both have a client-side default so rows inserted in the same second keep
    a stable order, and a server default for rows written by other processes
    (the external ingestion pipeline).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        sort_order=100,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
        sort_order=101,
    )


class CreatedAtMixin:
    """
    Mixin that provides only created_at timestamp.

    Use this for immutable records where updated_at doesn't make sense:
    - Citations
    - Saved answers (snapshots)
    - Audit log entries (append-only)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        sort_order=100,
    )


# =============================================================================
# DATABASE LIFECYCLE UTILITIES
# =============================================================================

async def init_db() -> None:
    """
    Initialize the database by creating all tables.

    Note: In production, use Alembic migrations instead.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db() -> None:
    """
    Drop all tables in the database.

    Warning: This is destructive! Only use in testing.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Dispose of the engine and close all connections (app shutdown)."""
    await engine.dispose()
