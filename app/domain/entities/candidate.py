"""ProfessionalCandidate entity — a proposed match between a request and a professional."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.errors import InvalidStateError
from app.domain.value_objects.enums import CandidateStatus


@dataclass
class ProfessionalCandidate:
    id: int | None
    request_id: int
    professional_id: int
    distance_km: float
    estimated_arrival_minutes: int
    status: CandidateStatus = CandidateStatus.AVAILABLE
    proposed_price: float | None = None
    notes: str | None = None
    proposed_at: datetime | None = None
    responded_at: datetime | None = None

    def is_live(self) -> bool:
        return self.status == CandidateStatus.AVAILABLE

    def resolve(
        self,
        target: CandidateStatus,
        at: datetime,
        proposed_price: float | None = None,
        notes: str | None = None,
    ) -> None:
        """Move out of ``available``; candidates resolve exactly once."""
        if not self.is_live() or target == CandidateStatus.AVAILABLE:
            raise InvalidStateError("ProfessionalCandidate", self.status.value, target.value)
        self.status = target
        self.responded_at = at
        if proposed_price is not None:
            self.proposed_price = proposed_price
        if notes is not None:
            self.notes = notes
