"""Tests for DispatchRequestUseCase and ReplenishCandidatesUseCase."""

from __future__ import annotations

import pytest

from app.application.results import Outcome
from app.domain.events import CandidateProposed
from app.domain.value_objects.enums import CandidateStatus, RequestStatus, UrgencyLevel
from app.domain.value_objects.pricing import PricingRule
from fakes import FakeRequestRepo, World, professional

CROWD = [professional(i, km=0.5 * i, reputation=80.0) for i in range(1, 9)]


@pytest.fixture
def world(now):
    return World(now, professionals=CROWD)


@pytest.mark.asyncio
async def test_dispatch_proposes_top_five(world):
    world.add_request()

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.SUCCESS
    assert [c.professional_id for c in result.candidates] == [1, 2, 3, 4, 5]
    assert all(c.status == CandidateStatus.AVAILABLE for c in world.candidates.for_request(1))
    assert len(result.events) == 5
    assert all(isinstance(e, CandidateProposed) for e in result.events)


@pytest.mark.asyncio
async def test_proposal_carries_eta_and_suggested_price(now):
    rules = [PricingRule("plomeria", UrgencyLevel.HIGH, base_price=800.0, urgency_multiplier=1.8)]
    world = World(now, professionals=CROWD, rules=rules)
    world.add_request()

    result = await world.dispatch.execute(1)

    first = result.events[0]
    assert first.professional_id == 1
    assert first.distance_km == pytest.approx(0.5, abs=0.01)
    assert first.estimated_arrival_minutes == 16
    assert first.suggested_price == 1440.0
    assert first.urgency_level == UrgencyLevel.HIGH


@pytest.mark.asyncio
async def test_second_dispatch_is_noop(world):
    world.add_request()

    await world.dispatch.execute(1)
    again = await world.dispatch.execute(1)

    assert again.outcome == Outcome.NOOP
    assert again.events == []
    assert len(world.candidates.for_request(1)) == 5


@pytest.mark.asyncio
async def test_dispatch_tops_up_below_floor_without_duplicates(world):
    world.add_request()
    world.add_candidate(1, 1)
    world.add_candidate(1, 2, status=CandidateStatus.DECLINED)

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.SUCCESS
    # 5 slots minus 1 live, professionals 1 and 2 already had their turn
    assert [c.professional_id for c in result.candidates] == [3, 4, 5, 6]
    pairs = [c.professional_id for c in world.candidates.for_request(1)]
    assert len(pairs) == len(set(pairs))


@pytest.mark.asyncio
async def test_no_eligible_professionals(now):
    world = World(now, professionals=[professional(1, km=2.0, specialties=("Pintor",))])
    world.add_request()

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.NO_ELIGIBLE_PROFESSIONALS
    assert world.candidates.for_request(1) == []
    assert world.requests.status_of(1) == RequestStatus.PENDING


@pytest.mark.asyncio
async def test_retry_with_wider_radius_reaches_farther_professional(now):
    world = World(now, professionals=[professional(1, km=18.0)])
    world.add_request()

    first = await world.dispatch.execute(1)
    retry = await world.dispatch.execute(1, radius_km=25.0)

    assert first.outcome == Outcome.NO_ELIGIBLE_PROFESSIONALS
    assert retry.outcome == Outcome.SUCCESS
    assert [c.professional_id for c in world.candidates.for_request(1)] == [1]


@pytest.mark.asyncio
async def test_dispatch_on_assigned_request_is_noop(world):
    world.add_request(status=RequestStatus.ASSIGNED)

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.NOOP
    assert world.candidates.for_request(1) == []


@pytest.mark.asyncio
async def test_dispatch_on_cancelled_request_is_invalid(world):
    world.add_request(status=RequestStatus.CANCELLED)

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.INVALID_STATE
    assert world.candidates.for_request(1) == []


@pytest.mark.asyncio
async def test_dispatch_unknown_request(world):
    assert (await world.dispatch.execute(99)).outcome == Outcome.NOT_FOUND


class CancellingRequestRepo(FakeRequestRepo):
    """Flips the request to cancelled right after the dispatch lock is taken."""

    async def get_for_update(self, request_id):
        request = await super().get_for_update(request_id)
        self.requests[request_id].status = RequestStatus.CANCELLED
        return request


@pytest.mark.asyncio
async def test_cancel_landing_mid_dispatch_supersedes_fresh_candidates(now):
    world = World(now, professionals=CROWD, requests=CancellingRequestRepo())
    world.add_request()

    result = await world.dispatch.execute(1)

    assert result.outcome == Outcome.NOOP
    assert result.events == []
    statuses = world.candidates.statuses(1)
    assert statuses
    assert set(statuses.values()) == {CandidateStatus.SUPERSEDED}


@pytest.mark.asyncio
async def test_replenish_uses_wider_radius(now):
    near = [professional(i, km=1.0 * i, reputation=80.0) for i in range(1, 4)]
    far = [professional(10, km=18.0, reputation=80.0)]
    world = World(now, professionals=near + far)
    world.add_request()
    world.add_candidate(1, 1, status=CandidateStatus.DECLINED)
    world.add_candidate(1, 2)
    world.add_candidate(1, 3)

    result = await world.replenish.execute(1)

    assert result.outcome == Outcome.SUCCESS
    assert [c.professional_id for c in result.candidates] == [10]


@pytest.mark.asyncio
async def test_replenish_noop_when_floor_met(world):
    world.add_request()
    for pid in (1, 2, 3):
        world.add_candidate(1, pid)

    result = await world.replenish.execute(1)

    assert result.outcome == Outcome.NOOP
    assert len(world.candidates.for_request(1)) == 3


@pytest.mark.asyncio
async def test_replenish_noop_once_assigned(world):
    world.add_request(status=RequestStatus.ASSIGNED)
    assert (await world.replenish.execute(1)).outcome == Outcome.NOOP
