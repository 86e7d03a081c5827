"""Tests for CancelUrgentRequestUseCase."""

from __future__ import annotations

import pytest

from app.application.results import Outcome
from app.application.use_cases.notifications import NotificationDispatcher
from app.domain.events import CandidatesSuperseded, RequestCancelled
from app.domain.value_objects.enums import CandidateStatus, RequestStatus
from fakes import FakeOutbox, World


@pytest.fixture
def world(now):
    return World(now)


@pytest.mark.asyncio
async def test_cancel_pending_closes_live_candidates(world):
    world.add_request()
    world.add_candidate(1, 1)
    world.add_candidate(1, 2)

    result = await world.cancel.execute(1, requester_id=7)

    assert result.outcome == Outcome.SUCCESS
    assert world.requests.status_of(1) == RequestStatus.CANCELLED
    assert set(world.candidates.statuses(1).values()) == {CandidateStatus.SUPERSEDED}

    cancelled, superseded = result.events
    assert isinstance(cancelled, RequestCancelled)
    assert set(cancelled.professional_ids) == {1, 2}
    assert isinstance(superseded, CandidatesSuperseded)
    assert superseded.reason == "cancelled"


@pytest.mark.asyncio
async def test_stale_accept_after_cancel_creates_no_assignment(world):
    world.add_request()
    world.add_candidate(1, 1)
    world.add_candidate(1, 2)

    await world.cancel.execute(1, requester_id=7)
    late = await world.accept.execute(1, 2)

    assert late.outcome == Outcome.NO_LONGER_AVAILABLE
    assert world.assignments.assignments == {}
    assert world.requests.status_of(1) == RequestStatus.CANCELLED


@pytest.mark.asyncio
async def test_only_requester_may_cancel(world):
    world.add_request()
    world.add_candidate(1, 1)

    result = await world.cancel.execute(1, requester_id=8)

    assert result.outcome == Outcome.FORBIDDEN
    assert world.requests.status_of(1) == RequestStatus.PENDING
    assert world.candidates.statuses(1) == {1: CandidateStatus.AVAILABLE}


@pytest.mark.asyncio
async def test_cancel_twice_is_invalid_state(world):
    world.add_request()

    await world.cancel.execute(1, requester_id=7)
    again = await world.cancel.execute(1, requester_id=7)

    assert again.outcome == Outcome.INVALID_STATE


@pytest.mark.asyncio
async def test_cancel_completed_request_is_invalid_state(world):
    world.add_request(status=RequestStatus.COMPLETED)
    assert (await world.cancel.execute(1, requester_id=7)).outcome == Outcome.INVALID_STATE


@pytest.mark.asyncio
async def test_cancel_without_candidates_emits_only_cancellation(world):
    world.add_request()

    result = await world.cancel.execute(1, requester_id=7)

    assert [type(e) for e in result.events] == [RequestCancelled]


@pytest.mark.asyncio
async def test_cancel_unknown_request(world):
    assert (await world.cancel.execute(42, requester_id=7)).outcome == Outcome.NOT_FOUND


@pytest.mark.asyncio
async def test_cancel_after_accept_tells_the_assigned_professional(world):
    world.add_request()
    world.add_candidate(1, 1)
    world.add_candidate(1, 2)
    await world.accept.execute(1, 1)

    result = await world.cancel.execute(1, requester_id=7)

    assert result.outcome == Outcome.SUCCESS
    assert [type(e) for e in result.events] == [RequestCancelled]
    assert result.events[0].professional_ids == (1,)

    outbox = FakeOutbox()
    dispatcher = NotificationDispatcher(outbox)
    for event in result.events:
        await dispatcher.handle(event)
    assert [(m.recipient_id, m.kind) for m in outbox.messages] == [(1, "urgent_request_cancelled")]
