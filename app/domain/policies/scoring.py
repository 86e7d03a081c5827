"""CandidateScoringPolicy — bounded composite score for a professional.

Components (max points):
  distance      35   35 − 3.5 per km, nothing beyond 10 km
  reputation    25   reputation score normalised to 0..100
  credentials    5   fixed bonus per active credential, capped
  profile       15   description / photo / experience / verified, capped
  activity      15   flat; reaching the scorer implies the availability gate passed
"""

from __future__ import annotations

from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.value_objects.enums import CredentialType

DISTANCE_WEIGHT = 35.0
DISTANCE_PENALTY_PER_KM = 3.5
REPUTATION_WEIGHT = 25.0
CREDENTIAL_CAP = 5.0
PROFILE_CAP = 15.0
ACTIVITY_BASELINE = 15.0
MAX_SCORE = 100.0

CREDENTIAL_BONUS: dict[str, float] = {
    CredentialType.PUNCTUALITY.value: 2.0,
    CredentialType.RATING.value: 2.0,
    CredentialType.COMPLETED_JOBS.value: 1.0,
    CredentialType.IDENTITY_VERIFIED.value: 3.0,
}
UNKNOWN_CREDENTIAL_BONUS = 1.0


def distance_component(distance_km: float) -> float:
    return max(0.0, DISTANCE_WEIGHT - distance_km * DISTANCE_PENALTY_PER_KM)


def reputation_component(reputation_score: float) -> float:
    normalized = min(max(reputation_score, 0.0) / 100.0, 1.0)
    return normalized * REPUTATION_WEIGHT


def credential_bonus(credentials: tuple[str, ...] | list[str]) -> float:
    bonus = sum(CREDENTIAL_BONUS.get(c, UNKNOWN_CREDENTIAL_BONUS) for c in credentials)
    return min(bonus, CREDENTIAL_CAP)


def profile_completeness(professional: ProfessionalSnapshot) -> float:
    points = 0.0
    if professional.has_description:
        points += 3
    if professional.has_photo:
        points += 3
    if professional.years_experience:
        points += 3
    if professional.is_verified:
        points += 6
    return min(points, PROFILE_CAP)


def score_professional(professional: ProfessionalSnapshot, distance_km: float) -> float:
    """Composite score in [0, 100]."""
    score = (
        distance_component(distance_km)
        + reputation_component(professional.reputation_score)
        + credential_bonus(professional.credentials)
        + profile_completeness(professional)
        + ACTIVITY_BASELINE
    )
    return min(max(score, 0.0), MAX_SCORE)


def estimate_arrival_minutes(distance_km: float) -> int:
    """Linear ETA: 15 minutes to set off plus 2 minutes per km, half rounds up."""
    return int(15 + distance_km * 2 + 0.5)
