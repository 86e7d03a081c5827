"""Settlement gateway adapters — HTTP escrow service or local ledger."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime

import httpx

from app.application.ports.settlement_port import SettlementGateway
from app.config import settings
from app.domain.errors import DownstreamUnavailableError
from app.domain.value_objects.enums import EscrowStatus

logger = logging.getLogger(__name__)


class HttpSettlementGateway(SettlementGateway):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.settlement_service_url).rstrip("/")
        self._timeout = timeout or settings.gateway_timeout_seconds
        self._max_retries = max_retries or settings.gateway_max_retries
        self._backoff = backoff_seconds
        self._transport = transport

    async def open_escrow(self, reference_id: int, amount: float, release_deadline: datetime) -> str:
        data = await self._request(
            "POST",
            "/escrows",
            json={
                "reference_id": reference_id,
                "amount": amount,
                "release_deadline": release_deadline.isoformat(),
            },
        )
        return str(data["escrow_id"])

    async def get_escrow_status(self, escrow_id: str) -> EscrowStatus:
        data = await self._request("GET", f"/escrows/{escrow_id}")
        return EscrowStatus(data["status"])

    async def release_escrow(self, escrow_id: str) -> None:
        await self._request("POST", f"/escrows/{escrow_id}/release")

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        last_error = ""
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            for attempt in range(1, self._max_retries + 1):
                try:
                    response = await client.request(method, path, json=json)
                    if response.status_code < 500:
                        response.raise_for_status()
                        return response.json() if response.content else {}
                    last_error = f"HTTP {response.status_code}"
                except httpx.HTTPStatusError as e:
                    raise DownstreamUnavailableError("settlement", str(e)) from e
                except httpx.HTTPError as e:
                    last_error = str(e) or type(e).__name__
                except (ValueError, KeyError) as e:
                    last_error = f"bad response: {e}"

                logger.warning(
                    "Attempt %d/%d: settlement %s %s failed: %s",
                    attempt, self._max_retries, method, path, last_error,
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(self._backoff * 2 ** (attempt - 1))

        raise DownstreamUnavailableError("settlement", last_error)


class LocalSettlementGateway(SettlementGateway):
    """Process-local escrow ledger for development without a settlement service."""

    def __init__(self) -> None:
        self._escrows: dict[str, EscrowStatus] = {}

    async def open_escrow(self, reference_id: int, amount: float, release_deadline: datetime) -> str:
        escrow_id = f"local-{reference_id}-{uuid.uuid4().hex[:8]}"
        self._escrows[escrow_id] = EscrowStatus.PENDING
        logger.info("Local escrow %s holds %.2f until %s", escrow_id, amount, release_deadline.isoformat())
        return escrow_id

    async def get_escrow_status(self, escrow_id: str) -> EscrowStatus:
        # Unknown ids come from a previous process; treat them as still held
        return self._escrows.get(escrow_id, EscrowStatus.PENDING)

    async def release_escrow(self, escrow_id: str) -> None:
        self._escrows[escrow_id] = EscrowStatus.RELEASED
        logger.info("Local escrow %s released", escrow_id)
