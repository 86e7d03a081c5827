"""RankingPolicy — deterministic ordering of professionals and requests."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.entities.urgent_request import UrgentRequest


@dataclass(frozen=True)
class ScoredProfessional:
    professional: ProfessionalSnapshot
    distance_km: float
    score: float

    @property
    def professional_id(self) -> int:
        return self.professional.id


@dataclass(frozen=True)
class NearbyRequest:
    request: UrgentRequest
    distance_km: float
    already_candidate: bool


def rank_professionals(scored: list[ScoredProfessional], limit: int) -> list[ScoredProfessional]:
    """Best score first; ties go to the closer professional, then the lower id."""
    ordered = sorted(scored, key=lambda s: (-s.score, s.distance_km, s.professional.id))
    return ordered[:limit]


def rank_requests(nearby: list[NearbyRequest]) -> list[NearbyRequest]:
    """Most urgent first, then closest, then oldest id."""
    return sorted(
        nearby,
        key=lambda n: (-n.request.urgency_level.rank, n.distance_km, n.request.id or 0),
    )
