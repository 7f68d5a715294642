"""
Database session management for FastAPI and standalone usage.

This module provides:
- FastAPI dependency for request-scoped database sessions
- Context manager for scripts (seeding, admin grants)
- Transaction helper

Usage in FastAPI:
    @router.get("/saved-answers")
    async def list_saved(db: AsyncSession = Depends(get_db)):
        ...

Usage in scripts:
    async with get_db_context() as db:
        async with transaction(db):
            db.add(AppAdmin(user_id=user_id, email=email))
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.db.base import AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    One session per request, closed when the request completes. The session
    is NOT auto-committed: services commit explicitly, and anything left
    uncommitted is rolled back on close.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions outside of FastAPI.

    The session is closed when exiting the context, even if an exception
    occurs.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for explicit transaction control.

    Commits on successful completion, rolls back on any exception.

    Usage:
        async with transaction(db):
            db.add(source)
            db.add(AuditLog.create_insert(...))
            # Both are committed or neither is committed
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
