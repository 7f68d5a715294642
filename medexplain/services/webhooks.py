"""
Async client for external ingestion webhooks.

A trigger is a single fire-and-forget POST:

    POST <job-type specific URL>
    {"job_type": "FDA Ingestion", "triggered_at": "2025-11-10T04:37:53+00:00"}

Any 2xx/3xx status counts as acknowledged. There is no retry and no
idempotency key; the external pipeline reports progress by writing to
ingestion_jobs directly.
"""

from datetime import datetime

import httpx

from medexplain.core.config import settings
from medexplain.core.errors import WebhookFailed
from medexplain.core.logging import get_logger
from medexplain.db.base import utc_now

logger = get_logger(__name__)


class WebhookClient:
    """
    Posts ingestion triggers.

    Usage:
        async with WebhookClient() as client:
            await client.trigger("FDA Ingestion", url)
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize webhook client.

        Args:
            timeout: Request timeout in seconds (default from settings)
            transport: Custom httpx transport (tests)
        """
        self.timeout = timeout if timeout is not None else settings.webhook_timeout_seconds
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "WebhookClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "WebhookClient must be used as async context manager: "
                "async with WebhookClient() as client: ..."
            )
        return self._client

    async def trigger(
        self,
        job_type: str,
        url: str,
        triggered_at: datetime | None = None,
    ) -> datetime:
        """
        Notify an ingestion pipeline.

        Returns:
            The triggered_at timestamp that was sent

        Raises:
            WebhookFailed: Transport error, timeout, or error status
        """
        triggered_at = triggered_at or utc_now()
        payload = {"job_type": job_type, "triggered_at": triggered_at.isoformat()}

        try:
            response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Webhook request failed", job_type=job_type, url=url, error=str(e))
            raise WebhookFailed(f"Webhook failed: {e}") from e

        if response.is_error:
            logger.warning(
                "Webhook rejected trigger",
                job_type=job_type,
                url=url,
                status_code=response.status_code,
            )
            raise WebhookFailed(f"Webhook failed with status {response.status_code}")

        logger.info("Webhook triggered", job_type=job_type, status_code=response.status_code)
        return triggered_at
