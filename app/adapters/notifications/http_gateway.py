"""Notification gateway adapters — HTTP delivery service or log-only."""

from __future__ import annotations

import asyncio
import logging

import httpx

from app.application.ports.notification_port import NotificationGateway, NotificationMessage
from app.config import settings
from app.domain.errors import DownstreamUnavailableError

logger = logging.getLogger(__name__)


class HttpNotificationGateway(NotificationGateway):
    """POSTs each message to the notification service, retrying with backoff."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.notification_service_url).rstrip("/")
        self._timeout = timeout or settings.gateway_timeout_seconds
        self._max_retries = max_retries or settings.gateway_max_retries
        self._backoff = backoff_seconds
        self._transport = transport

    async def send(self, message: NotificationMessage) -> None:
        payload = {
            "recipient_id": message.recipient_id,
            "type": message.kind,
            "title": message.title,
            "body": message.body,
            "channels": [c.value for c in message.channels],
            "metadata": message.metadata,
        }

        last_error = ""
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            for attempt in range(1, self._max_retries + 1):
                try:
                    response = await client.post("/notifications", json=payload)
                    if response.status_code < 500:
                        response.raise_for_status()
                        return
                    last_error = f"HTTP {response.status_code}"
                except httpx.HTTPStatusError as e:
                    # 4xx: the message itself is bad, retrying will not help
                    raise DownstreamUnavailableError("notifications", str(e)) from e
                except httpx.HTTPError as e:
                    last_error = str(e) or type(e).__name__

                logger.warning(
                    "Attempt %d/%d: notification to %s failed: %s",
                    attempt, self._max_retries, message.recipient_id, last_error,
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(self._backoff * 2 ** (attempt - 1))

        raise DownstreamUnavailableError("notifications", last_error)


class LoggingNotificationGateway(NotificationGateway):
    """Used when no notification service is configured."""

    async def send(self, message: NotificationMessage) -> None:
        logger.info(
            "[%s] → %s via %s: %s",
            message.kind,
            message.recipient_id,
            ",".join(c.value for c in message.channels),
            message.title,
        )
