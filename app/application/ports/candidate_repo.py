"""Port interface for professional candidate persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.candidate import ProfessionalCandidate
from app.domain.value_objects.enums import CandidateStatus


class CandidateRepository(ABC):
    @abstractmethod
    async def add(self, candidate: ProfessionalCandidate) -> ProfessionalCandidate:
        """Persist a new candidate. (request, professional) pairs are unique."""
        ...

    @abstractmethod
    async def get(self, request_id: int, professional_id: int) -> ProfessionalCandidate | None:
        ...

    @abstractmethod
    async def list_by_request(self, request_id: int) -> list[ProfessionalCandidate]:
        ...

    @abstractmethod
    async def request_ids_for_professional(self, professional_id: int) -> set[int]:
        ...

    @abstractmethod
    async def resolve(
        self,
        candidate_id: int,
        new_status: CandidateStatus,
        responded_at: datetime,
        proposed_price: float | None = None,
        notes: str | None = None,
    ) -> bool:
        """Conditionally move an ``available`` candidate to *new_status*.

        Returns False when the candidate was no longer ``available``.
        """
        ...

    @abstractmethod
    async def supersede_available(
        self,
        request_id: int,
        responded_at: datetime,
        except_candidate_id: int | None = None,
    ) -> list[ProfessionalCandidate]:
        """Move every still-``available`` candidate of the request to ``superseded``.

        Returns the candidates that were transitioned.
        """
        ...

    @abstractmethod
    async def list_stale(self, proposed_before: datetime) -> list[ProfessionalCandidate]:
        """``available`` candidates proposed before the cutoff on pending requests."""
        ...
