"""Tests for what a professional sees when browsing urgent requests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.application.use_cases.find_nearby_requests import FindNearbyRequestsUseCase
from app.domain.value_objects.enums import RequestStatus, UrgencyLevel
from fakes import BA_CENTER, World, point_north, professional


@pytest.fixture
def world(now):
    w = World(now)
    w.add_request(1, urgency_level=UrgencyLevel.LOW, location=point_north(BA_CENTER, 1.0))
    w.add_request(2, urgency_level=UrgencyLevel.HIGH, location=point_north(BA_CENTER, 6.0))
    w.add_request(3, urgency_level=UrgencyLevel.HIGH, location=point_north(BA_CENTER, 2.0))
    w.add_request(4, urgency_level=UrgencyLevel.HIGH, location=point_north(BA_CENTER, 30.0))
    w.add_request(5, service_category="pintura")
    w.add_request(6, status=RequestStatus.CANCELLED)
    w.add_request(7, created_at=now - timedelta(hours=30))
    return w


def _use_case(world, clock):
    return FindNearbyRequestsUseCase(world.requests, world.candidates, world.policy, clock)


@pytest.mark.asyncio
async def test_nearby_sorted_by_urgency_then_distance(world, clock):
    results = await _use_case(world, clock).execute(BA_CENTER, 15.0, professional(20, km=0.0))

    assert [n.request.id for n in results] == [3, 2, 1]
    assert results[0].distance_km == pytest.approx(2.0, abs=0.01)


@pytest.mark.asyncio
async def test_flags_requests_the_professional_already_holds(world, clock):
    world.add_candidate(2, 20)

    results = await _use_case(world, clock).execute(BA_CENTER, 15.0, professional(20, km=0.0))

    flags = {n.request.id: n.already_candidate for n in results}
    assert flags == {3: False, 2: True, 1: False}


@pytest.mark.asyncio
async def test_other_trades_see_their_own_category(world, clock):
    painter = professional(21, km=0.0, specialties=("Pintor",))
    results = await _use_case(world, clock).execute(BA_CENTER, 15.0, painter)
    assert [n.request.id for n in results] == [5]
