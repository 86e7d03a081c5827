"""Tests for ExpireStaleOffersUseCase."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.application.results import Outcome
from app.application.use_cases.expire_offers import TIMEOUT_REASON
from app.domain.value_objects.enums import CandidateStatus
from fakes import World


@pytest.mark.asyncio
async def test_offers_past_ttl_are_declined_as_timeouts(now):
    world = World(now)
    world.add_request()
    world.add_candidate(1, 1, proposed_at=now - timedelta(minutes=11))
    world.add_candidate(1, 2, proposed_at=now - timedelta(minutes=3))

    result = await world.expire.execute()

    assert result.outcome == Outcome.SUCCESS
    assert world.candidates.statuses(1) == {
        1: CandidateStatus.DECLINED,
        2: CandidateStatus.AVAILABLE,
    }
    assert world.candidates.for_request(1)[0].notes == TIMEOUT_REASON
    (event,) = result.events
    assert event.professional_id == 1
    assert event.timed_out


@pytest.mark.asyncio
async def test_nothing_stale_is_noop(now):
    world = World(now)
    world.add_request()
    world.add_candidate(1, 1)

    result = await world.expire.execute()

    assert result.outcome == Outcome.NOOP
    assert result.events == []


@pytest.mark.asyncio
async def test_answered_offers_are_left_alone(now):
    world = World(now)
    world.add_request()
    world.add_candidate(1, 1, status=CandidateStatus.SUPERSEDED, proposed_at=now - timedelta(hours=1))

    assert (await world.expire.execute()).outcome == Outcome.NOOP
