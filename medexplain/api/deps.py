"""
Shared FastAPI dependencies.

The caller is authenticated and resolved into a Principal once per request;
endpoints depend on ``get_principal`` (any authenticated user) or
``get_admin_principal`` (administrators only).
"""

from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.core.access import Principal, require_admin, resolve_principal
from medexplain.core.errors import Unauthorized
from medexplain.core.logging import bind_context
from medexplain.db import get_db
from medexplain.services.webhooks import WebhookClient

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Access token issued by the auth provider",
)


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Authenticate the bearer token and resolve admin membership."""
    if credentials is None:
        raise Unauthorized()
    principal = await resolve_principal(db, credentials.credentials)
    bind_context(user_id=str(principal.user_id), is_admin=principal.is_admin)
    return principal


async def get_admin_principal(principal: Principal = Depends(get_principal)) -> Principal:
    """Same as get_principal, but rejects non-admins with 403."""
    require_admin(principal)
    return principal


async def get_webhook_client() -> AsyncGenerator[WebhookClient, None]:
    """Webhook client scoped to one request."""
    async with WebhookClient() as client:
        yield client
