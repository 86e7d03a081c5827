"""Tests for the candidate scoring policy."""

import pytest

from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.policies.scoring import (
    credential_bonus,
    distance_component,
    estimate_arrival_minutes,
    profile_completeness,
    reputation_component,
    score_professional,
)
from app.domain.value_objects.enums import CredentialType
from app.domain.value_objects.geo_point import GeoPoint


def _pro(**kwargs) -> ProfessionalSnapshot:
    kwargs.setdefault("reputation_score", 50.0)
    return ProfessionalSnapshot(id=1, name="Ana", location=GeoPoint(-34.6, -58.38), **kwargs)


def test_distance_component_bounds():
    assert distance_component(0.0) == 35.0
    assert distance_component(4.0) == pytest.approx(21.0)
    assert distance_component(10.0) == 0.0
    assert distance_component(25.0) == 0.0


def test_reputation_normalised_and_clamped():
    assert reputation_component(100.0) == 25.0
    assert reputation_component(60.0) == pytest.approx(15.0)
    assert reputation_component(250.0) == 25.0
    assert reputation_component(-5.0) == 0.0


def test_credential_bonus_is_capped():
    all_credentials = tuple(c.value for c in CredentialType)
    assert credential_bonus(all_credentials) == 5.0
    assert credential_bonus((CredentialType.PUNCTUALITY.value,)) == 2.0
    assert credential_bonus(("desconocida",)) == 1.0
    assert credential_bonus(()) == 0.0


def test_profile_completeness():
    assert profile_completeness(_pro()) == 0.0
    full = _pro(has_description=True, has_photo=True, years_experience=8, is_verified=True)
    assert profile_completeness(full) == 15.0


def test_score_non_increasing_in_distance():
    pro = _pro(reputation_score=80.0)
    scores = [score_professional(pro, d) for d in (0.0, 1.0, 2.5, 5.0, 9.9, 10.0, 30.0)]
    assert scores == sorted(scores, reverse=True)


def test_score_non_decreasing_in_reputation():
    scores = [score_professional(_pro(reputation_score=r), 3.0) for r in (0, 20, 55, 90, 100)]
    assert scores == sorted(scores)


def test_score_stays_in_range():
    best = _pro(
        reputation_score=100.0,
        credentials=tuple(c.value for c in CredentialType),
        has_description=True, has_photo=True, years_experience=20, is_verified=True,
    )
    assert score_professional(best, 0.0) == pytest.approx(95.0)
    assert 0.0 <= score_professional(_pro(reputation_score=0.0), 500.0) <= 100.0


def test_arrival_estimate():
    assert estimate_arrival_minutes(0.0) == 15
    assert estimate_arrival_minutes(1.0) == 17
    assert estimate_arrival_minutes(2.25) == 20
