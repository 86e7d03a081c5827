"""Tests for professional and request ranking."""

from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.policies.ranking import (
    NearbyRequest,
    ScoredProfessional,
    rank_professionals,
    rank_requests,
)
from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.geo_point import GeoPoint

HERE = GeoPoint(-34.6037, -58.3816)


def _scored(pid: int, score: float, distance: float) -> ScoredProfessional:
    return ScoredProfessional(
        professional=ProfessionalSnapshot(id=pid, name=f"P{pid}", location=HERE),
        distance_km=distance,
        score=score,
    )


def _nearby(rid: int, urgency: UrgencyLevel, distance: float) -> NearbyRequest:
    request = UrgentRequest(
        id=rid, requester_id=1, description="x", location=HERE, urgency_level=urgency
    )
    return NearbyRequest(request=request, distance_km=distance, already_candidate=False)


def test_highest_score_first():
    ranked = rank_professionals([_scored(1, 50, 1.0), _scored(2, 80, 3.0)], limit=10)
    assert [s.professional_id for s in ranked] == [2, 1]


def test_ties_go_to_closer_then_lower_id():
    ranked = rank_professionals(
        [_scored(3, 70, 2.0), _scored(2, 70, 2.0), _scored(1, 70, 4.0)], limit=10
    )
    assert [s.professional_id for s in ranked] == [2, 3, 1]


def test_truncates_to_limit():
    ranked = rank_professionals([_scored(i, 100 - i, 1.0) for i in range(1, 15)], limit=10)
    assert len(ranked) == 10
    assert ranked[0].professional_id == 1


def test_requests_ordered_by_urgency_then_distance_then_id():
    ranked = rank_requests(
        [
            _nearby(1, UrgencyLevel.LOW, 0.5),
            _nearby(2, UrgencyLevel.HIGH, 5.0),
            _nearby(3, UrgencyLevel.HIGH, 2.0),
            _nearby(4, UrgencyLevel.MEDIUM, 1.0),
            _nearby(5, UrgencyLevel.HIGH, 2.0),
        ]
    )
    assert [n.request.id for n in ranked] == [3, 5, 2, 4, 1]
