"""ReplenishmentPolicy — how many new candidates a request needs."""

from __future__ import annotations

from app.domain.entities.candidate import ProfessionalCandidate


def live_count(candidates: list[ProfessionalCandidate]) -> int:
    return sum(1 for c in candidates if c.is_live())


def candidates_needed(candidates: list[ProfessionalCandidate], target: int) -> int:
    """Slots to fill so that *target* candidates are live (``available``)."""
    return max(0, target - live_count(candidates))


def excluded_professionals(candidates: list[ProfessionalCandidate]) -> frozenset[int]:
    """Professionals that must not be proposed again for this request.

    Covers every candidate ever created, resolved or not.
    """
    return frozenset(c.professional_id for c in candidates)


def has_enough_live(candidates: list[ProfessionalCandidate], floor: int) -> bool:
    return live_count(candidates) >= floor
