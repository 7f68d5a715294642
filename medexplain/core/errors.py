"""
Error taxonomy for MedExplain.

Every failure a caller can observe is one of these types. Services raise
them; the API layer converts them into ``ErrorResponse`` JSON via
``register_exception_handlers``. Nothing is retried automatically.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from medexplain.core.logging import get_logger
from medexplain.schemas.common import ErrorResponse

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Not in database yet."


class MedExplainError(Exception):
    """Base class for all user-visible failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "An error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class QuotaExceeded(MedExplainError):
    """Monthly query quota already used up."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "quota_exceeded"

    def __init__(self, limit: int, month: str) -> None:
        self.limit = limit
        self.month = month
        super().__init__(
            f"You have reached your monthly limit of {limit} queries. "
            "Please try again next month."
        )


class NotFound(MedExplainError):
    """Drug, gene, interaction or owned record absent.

    Drug, gene and interaction misses are deliberately not distinguished.
    """

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = NOT_FOUND_MESSAGE


class StorageUnavailable(MedExplainError):
    """The database could not be reached or rejected the statement."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "storage_unavailable"


class Unauthorized(MedExplainError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    default_message = "Authentication required"


class Forbidden(MedExplainError):
    """Authenticated, but lacking the capability for this operation."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    default_message = "Administrator access required"


class WebhookFailed(MedExplainError):
    """An ingestion webhook did not acknowledge the trigger."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error = "webhook_failed"
    default_message = "Webhook failed"


async def medexplain_error_handler(request: Request, exc: MedExplainError) -> JSONResponse:
    """Render a MedExplainError as an ErrorResponse body."""
    if exc.status_code >= 500:
        logger.error("Request failed", error=exc.error, message=exc.message)
    body = ErrorResponse(
        error=exc.error,
        message=exc.message,
        request_id=request.headers.get("X-Request-ID"),
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the MedExplainError handler to an application."""
    app.add_exception_handler(MedExplainError, medexplain_error_handler)  # type: ignore[arg-type]
