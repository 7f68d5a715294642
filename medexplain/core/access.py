"""
Access control layer.

Authorization is enforced here, in application code, so the same rules hold
on any storage backend. Every request is resolved once into a ``Principal``
and each service operation checks one of two capabilities:

- self-row ownership: SavedAnswer and UsageMonthly statements are always
  filtered with ``owned_by(model, principal)``
- admin membership: Source mutations, ingestion jobs, the audit log and the
  admin list are guarded by ``require_admin(principal)``

Reference tables (sources, drugs, genes, variants, phenotypes, guidelines,
interactions, citations) are readable by any authenticated principal.

Authentication is delegated to the external auth provider. We only verify
the bearer JWT it issued (shared secret, ``sub`` = user id).
"""

import uuid
from dataclasses import dataclass

from jose import JWTError, jwt
from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.core.config import settings
from medexplain.core.errors import Forbidden, StorageUnavailable, Unauthorized
from medexplain.core.logging import get_logger
from medexplain.db.models import AppAdmin

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, resolved once per request."""

    user_id: uuid.UUID
    is_admin: bool = False
    email: str | None = None


def decode_access_token(token: str) -> tuple[uuid.UUID, str | None]:
    """
    Verify a bearer token and extract the caller's identity.

    Args:
        token: Raw JWT from the Authorization header

    Returns:
        Tuple of (user_id, email)

    Raises:
        Unauthorized: Bad signature, expired, wrong audience, or no usable sub
    """
    options = {"verify_aud": settings.auth_jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options=options,
        )
    except JWTError as e:
        logger.info("Rejected bearer token", error=str(e))
        raise Unauthorized("Invalid or expired token") from e

    try:
        user_id = uuid.UUID(str(claims.get("sub")))
    except ValueError as e:
        raise Unauthorized("Token subject is not a user id") from e

    return user_id, claims.get("email")


async def is_admin(db: AsyncSession, user_id: uuid.UUID) -> bool:
    """Admin predicate: an app_admins row exists for the user."""
    try:
        result = await db.execute(
            select(AppAdmin.id).where(AppAdmin.user_id == user_id).limit(1)
        )
    except SQLAlchemyError as e:
        raise StorageUnavailable(str(e)) from e
    return result.scalar_one_or_none() is not None


async def resolve_principal(db: AsyncSession, token: str) -> Principal:
    """Authenticate a token and resolve the caller's capabilities."""
    user_id, email = decode_access_token(token)
    return Principal(
        user_id=user_id,
        is_admin=await is_admin(db, user_id),
        email=email,
    )


def require_admin(principal: Principal) -> None:
    """
    Admin capability check.

    Raises:
        Forbidden: The caller is not an administrator
    """
    if not principal.is_admin:
        logger.warning("Admin operation denied", user_id=str(principal.user_id))
        raise Forbidden()


def owned_by(model: type, principal: Principal) -> ColumnElement[bool]:
    """
    Ownership filter for user-owned tables.

    Usage:
        select(SavedAnswer).where(owned_by(SavedAnswer, principal))
    """
    return model.user_id == principal.user_id


async def list_admins(db: AsyncSession, principal: Principal) -> list[AppAdmin]:
    """Admin membership is itself readable by admins only."""
    require_admin(principal)
    try:
        result = await db.execute(select(AppAdmin).order_by(AppAdmin.created_at))
    except SQLAlchemyError as e:
        raise StorageUnavailable(str(e)) from e
    return list(result.scalars().all())
