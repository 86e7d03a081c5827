"""Tests for the in-process event bus."""

from __future__ import annotations

import logging

import pytest

from app.application.event_bus import EventBus
from app.domain.events import CandidateRejected, RequestCreated


@pytest.mark.asyncio
async def test_handlers_receive_only_their_event_type(now):
    bus = EventBus()
    created, rejected = [], []

    async def on_created(event):
        created.append(event)

    async def on_rejected(event):
        rejected.append(event)

    bus.subscribe(RequestCreated, on_created)
    bus.subscribe(CandidateRejected, on_rejected)

    await bus.publish(RequestCreated(request_id=1, occurred_at=now, requester_id=7))

    assert [e.request_id for e in created] == [1]
    assert rejected == []


@pytest.mark.asyncio
async def test_failing_handler_is_logged_and_others_still_run(now, caplog):
    bus = EventBus()
    seen = []

    async def broken(event):
        raise RuntimeError("boom")

    async def healthy(event):
        seen.append(event.request_id)

    bus.subscribe(RequestCreated, broken)
    bus.subscribe(RequestCreated, healthy)

    with caplog.at_level(logging.ERROR):
        await bus.publish_all(
            [
                RequestCreated(request_id=1, occurred_at=now, requester_id=7),
                RequestCreated(request_id=2, occurred_at=now, requester_id=7),
            ]
        )

    assert seen == [1, 2]
    assert "RequestCreated" in caplog.text


@pytest.mark.asyncio
async def test_publish_without_subscribers_is_silent(now):
    await EventBus().publish(RequestCreated(request_id=1, occurred_at=now, requester_id=7))
