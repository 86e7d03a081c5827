"""Tests for ProfessionalFinder with in-memory fakes."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.application.use_cases.find_professionals import ProfessionalFinder
from app.domain.value_objects.dispatch_policy import DispatchPolicy
from fakes import BA_CENTER, FakeAvailability, FakeDirectory, professional

SCENARIO = [
    professional(1, km=1.0, reputation=90.0),
    professional(2, km=4.0, reputation=60.0),
    professional(3, km=12.0, reputation=95.0),
]


def _finder(professionals, availability=None, policy=None, clock=None):
    kwargs = {"clock": clock} if clock else {}
    return ProfessionalFinder(
        FakeDirectory(professionals),
        availability or FakeAvailability(),
        policy or DispatchPolicy(),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_plomeria_scenario_returns_two_ranked_candidates():
    ranked = await _finder(SCENARIO).find_candidates(BA_CENTER, "plomeria", radius_km=10.0)

    assert [s.professional_id for s in ranked] == [1, 2]
    assert ranked[0].score > ranked[1].score
    assert ranked[0].distance_km == pytest.approx(1.0, abs=0.01)
    assert ranked[1].distance_km == pytest.approx(4.0, abs=0.01)


@pytest.mark.asyncio
async def test_wider_radius_lets_far_professional_in():
    ranked = await _finder(SCENARIO).find_candidates(BA_CENTER, "plomeria", radius_km=15.0)
    assert {s.professional_id for s in ranked} == {1, 2, 3}


@pytest.mark.asyncio
async def test_ineligible_specialty_is_filtered():
    painter = professional(4, km=0.5, reputation=100.0, specialties=("Pintor",))
    ranked = await _finder(SCENARIO + [painter]).find_candidates(BA_CENTER, "plomeria", 10.0)
    assert 4 not in [s.professional_id for s in ranked]


@pytest.mark.asyncio
async def test_professional_without_open_slot_is_skipped():
    ranked = await _finder(SCENARIO, FakeAvailability(busy={1})).find_candidates(
        BA_CENTER, "plomeria", 10.0
    )
    assert [s.professional_id for s in ranked] == [2]


@pytest.mark.asyncio
async def test_availability_outage_fails_open_by_default():
    ranked = await _finder(SCENARIO, FakeAvailability(broken=True)).find_candidates(
        BA_CENTER, "plomeria", 10.0
    )
    assert [s.professional_id for s in ranked] == [1, 2]


@pytest.mark.asyncio
async def test_availability_outage_can_fail_closed():
    finder = _finder(
        SCENARIO,
        FakeAvailability(broken=True),
        DispatchPolicy(availability_fail_open=False),
    )
    assert await finder.find_candidates(BA_CENTER, "plomeria", 10.0) == []


@pytest.mark.asyncio
async def test_excluded_professionals_never_returned():
    ranked = await _finder(SCENARIO).find_candidates(
        BA_CENTER, "plomeria", 10.0, exclude=frozenset({1})
    )
    assert [s.professional_id for s in ranked] == [2]


@pytest.mark.asyncio
async def test_exclusion_applies_before_truncation():
    crowd = [professional(i, km=0.1 * i, reputation=80.0) for i in range(1, 13)]
    ranked = await _finder(crowd).find_candidates(
        BA_CENTER, "plomeria", 10.0, exclude=frozenset({1, 2}), limit=10
    )
    assert len(ranked) == 10
    assert {1, 2}.isdisjoint(s.professional_id for s in ranked)


@pytest.mark.asyncio
async def test_results_truncated_to_finder_limit():
    crowd = [professional(i, km=0.2 * i, reputation=70.0) for i in range(1, 16)]
    ranked = await _finder(crowd).find_candidates(BA_CENTER, None, 10.0)
    assert len(ranked) == 10
    assert [s.professional_id for s in ranked] == list(range(1, 11))


@pytest.mark.asyncio
async def test_availability_window_starts_now(now, clock):
    availability = FakeAvailability()
    await _finder(SCENARIO, availability, clock=clock).find_candidates(BA_CENTER, "plomeria", 10.0)

    assert availability.windows
    assert all(w == (now, now + timedelta(hours=24)) for w in availability.windows)
