#!/usr/bin/env python3
"""
Grant or revoke the admin capability for a user.

Admins are users of the external auth provider listed in app_admins. There is
no API for managing that table; operators use this script.

Usage:
    # Grant admin rights
    python scripts/grant_admin.py 0b6d1f2e-8d4c-4f3e-9c1a-2f5e7a9b3c4d --email ops@example.org

    # Revoke admin rights
    python scripts/grant_admin.py 0b6d1f2e-8d4c-4f3e-9c1a-2f5e7a9b3c4d --revoke

Requirements:
    - Database must be running
    - Migration must be applied (alembic upgrade head)
"""

import argparse
import asyncio
import sys
import uuid

from sqlalchemy import delete, select

from medexplain.core.logging import get_logger, setup_logging
from medexplain.db import AppAdmin, dispose_engine, get_db_context

logger = get_logger(__name__)


async def grant(user_id: uuid.UUID, email: str) -> bool:
    """
    Insert an app_admins row.

    Returns:
        False if the user already was an admin
    """
    async with get_db_context() as db:
        existing = await db.execute(select(AppAdmin.id).where(AppAdmin.user_id == user_id))
        if existing.scalar_one_or_none():
            logger.info("User is already an admin", user_id=str(user_id))
            return False

        db.add(AppAdmin(user_id=user_id, email=email))
        await db.commit()

    logger.info("Admin granted", user_id=str(user_id), email=email)
    return True


async def revoke(user_id: uuid.UUID) -> bool:
    """
    Delete the user's app_admins row.

    Returns:
        False if the user was not an admin
    """
    async with get_db_context() as db:
        result = await db.execute(delete(AppAdmin).where(AppAdmin.user_id == user_id))
        await db.commit()

    revoked = result.rowcount > 0
    logger.info("Admin revoke", user_id=str(user_id), revoked=revoked)
    return revoked


async def run(args: argparse.Namespace) -> int:
    try:
        if args.revoke:
            changed = await revoke(args.user_id)
            print("Admin rights revoked." if changed else "User was not an admin.")
        else:
            changed = await grant(args.user_id, args.email)
            print("Admin rights granted." if changed else "User is already an admin.")
    finally:
        await dispose_engine()
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Grant or revoke MedExplain admin rights",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "user_id",
        type=uuid.UUID,
        help="Auth provider user id (UUID)",
    )

    parser.add_argument(
        "--email", "-e",
        type=str,
        default=None,
        help="Admin email address (required when granting)",
    )

    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Remove admin rights instead of granting them",
    )

    args = parser.parse_args()
    if not args.revoke and not args.email:
        parser.error("--email is required when granting admin rights")

    setup_logging()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
