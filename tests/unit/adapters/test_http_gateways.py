"""Tests for the HTTP notification and settlement gateways using httpx.MockTransport."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from app.adapters.notifications.http_gateway import HttpNotificationGateway
from app.adapters.settlement.http_settlement import HttpSettlementGateway, LocalSettlementGateway
from app.application.ports.notification_port import NotificationMessage
from app.domain.errors import DownstreamUnavailableError
from app.domain.value_objects.enums import EscrowStatus, NotificationChannel

BASE = "http://svc.test"
DEADLINE = datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc)

MESSAGE = NotificationMessage(
    recipient_id=5,
    kind="urgent_request",
    title="Urgent request nearby",
    body="New urgent request 2.4 km away",
    metadata={"request_id": 1},
    channels=(NotificationChannel.IN_APP, NotificationChannel.EMAIL),
)


def _notifier(handler) -> HttpNotificationGateway:
    return HttpNotificationGateway(
        base_url=BASE, max_retries=3, backoff_seconds=0, transport=httpx.MockTransport(handler)
    )


def _settlement(handler) -> HttpSettlementGateway:
    return HttpSettlementGateway(
        base_url=BASE, max_retries=3, backoff_seconds=0, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_notification_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(202)

    await _notifier(handler).send(MESSAGE)

    path, payload = seen[0]
    assert path == "/notifications"
    assert payload["recipient_id"] == 5
    assert payload["type"] == "urgent_request"
    assert payload["channels"] == ["in_app", "email"]
    assert payload["metadata"] == {"request_id": 1}


@pytest.mark.asyncio
async def test_notification_retries_server_errors():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503 if len(calls) < 3 else 200)

    await _notifier(handler).send(MESSAGE)
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_notification_gives_up_after_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(DownstreamUnavailableError):
        await _notifier(handler).send(MESSAGE)
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_notification_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(422, json={"detail": "bad recipient"})

    with pytest.raises(DownstreamUnavailableError):
        await _notifier(handler).send(MESSAGE)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_settlement_open_status_release():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/escrows":
            body = json.loads(request.content)
            assert body["reference_id"] == 9
            assert body["amount"] == 1200.0
            assert body["release_deadline"] == DEADLINE.isoformat()
            return httpx.Response(201, json={"escrow_id": "esc-abc"})
        if request.method == "GET" and request.url.path == "/escrows/esc-abc":
            return httpx.Response(200, json={"status": "pending"})
        if request.method == "POST" and request.url.path == "/escrows/esc-abc/release":
            return httpx.Response(204)
        return httpx.Response(404)

    gateway = _settlement(handler)

    assert await gateway.open_escrow(9, 1200.0, DEADLINE) == "esc-abc"
    assert await gateway.get_escrow_status("esc-abc") == EscrowStatus.PENDING
    await gateway.release_escrow("esc-abc")


@pytest.mark.asyncio
async def test_settlement_outage_raises_downstream_unavailable():
    def handler(request):
        return httpx.Response(500)

    with pytest.raises(DownstreamUnavailableError):
        await _settlement(handler).open_escrow(9, 1200.0, DEADLINE)


@pytest.mark.asyncio
async def test_local_settlement_ledger():
    gateway = LocalSettlementGateway()

    escrow_id = await gateway.open_escrow(9, 1200.0, DEADLINE)
    assert escrow_id.startswith("local-9-")
    assert await gateway.get_escrow_status(escrow_id) == EscrowStatus.PENDING

    await gateway.release_escrow(escrow_id)
    assert await gateway.get_escrow_status(escrow_id) == EscrowStatus.RELEASED
