"""Professional responses to an urgent request: accept or reject."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.candidate_repo import CandidateRepository
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.results import OperationResult, Outcome
from app.domain.entities.assignment import Assignment
from app.domain.events import CandidateAccepted, CandidateRejected, CandidatesSuperseded
from app.domain.value_objects.enums import AssignmentStatus, CandidateStatus, RequestStatus

logger = logging.getLogger(__name__)

_PENDING = frozenset({RequestStatus.PENDING})
_ASSIGNED = frozenset({RequestStatus.ASSIGNED})


class AcceptCandidateUseCase:
    """First accept wins; every other live candidate is superseded.

    The request row is the gate: a conditional ``pending → assigned`` update
    lets exactly one caller through. The winner then claims its candidate
    row; should that fail (the candidate was declined or superseded in the
    meantime) the request is handed back to ``pending``.
    """

    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        assignment_repo: AssignmentRepository,
        clock: Clock = utc_now,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._assignments = assignment_repo
        self._clock = clock

    async def execute(
        self,
        request_id: int,
        professional_id: int,
        proposed_price: float | None = None,
        notes: str | None = None,
    ) -> OperationResult:
        candidate = await self._candidates.get(request_id, professional_id)
        if candidate is None:
            return OperationResult.not_found(
                f"Professional {professional_id} is not a candidate for request {request_id}"
            )
        if not candidate.is_live():
            return _no_longer_available(f"Candidate already {candidate.status.value}")

        request = await self._requests.get_by_id(request_id)
        if request is None:
            return OperationResult.not_found(f"Urgent request {request_id} not found")
        if not request.is_open_for_candidates():
            return _no_longer_available(f"Request is {request.status.value}")

        if not await self._requests.compare_and_set_status(request_id, _PENDING, RequestStatus.ASSIGNED):
            logger.info(
                "Accept lost race: request %s already taken (professional %s)",
                request_id, professional_id,
            )
            return _no_longer_available("Request already taken")

        now = self._clock()
        claimed = await self._candidates.resolve(
            candidate.id, CandidateStatus.ACCEPTED, now, proposed_price=proposed_price, notes=notes
        )
        if not claimed:
            await self._requests.compare_and_set_status(request_id, _ASSIGNED, RequestStatus.PENDING)
            return _no_longer_available("Candidate no longer available")

        candidate.resolve(CandidateStatus.ACCEPTED, now, proposed_price=proposed_price, notes=notes)
        request.status = RequestStatus.ASSIGNED
        request.version += 1

        superseded = await self._candidates.supersede_available(
            request_id, now, except_candidate_id=candidate.id
        )

        assignment = Assignment(
            id=None,
            request_id=request_id,
            professional_id=professional_id,
            assigned_at=now,
            status=AssignmentStatus.ACTIVE,
            agreed_price=candidate.proposed_price,
            notes=notes,
        )
        await self._assignments.save(assignment)

        logger.info(
            "Request %s assigned to professional %s (assignment %s, %d superseded)",
            request_id, professional_id, assignment.id, len(superseded),
        )

        events = [
            CandidateAccepted(
                request_id=request_id,
                occurred_at=now,
                professional_id=professional_id,
                requester_id=request.requester_id,
                assignment_id=assignment.id,
                agreed_price=assignment.agreed_price,
            )
        ]
        if superseded:
            events.append(
                CandidatesSuperseded(
                    request_id=request_id,
                    occurred_at=now,
                    professional_ids=tuple(c.professional_id for c in superseded),
                    reason="taken",
                )
            )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message="Request assigned",
            request=request,
            assignment=assignment,
            candidates=[candidate],
            events=events,
        )


class RejectCandidateUseCase:
    """Record a decline; the top-up runs off the emitted event."""

    def __init__(self, candidate_repo: CandidateRepository, clock: Clock = utc_now):
        self._candidates = candidate_repo
        self._clock = clock

    async def execute(
        self,
        request_id: int,
        professional_id: int,
        reason: str | None = None,
        timed_out: bool = False,
    ) -> OperationResult:
        candidate = await self._candidates.get(request_id, professional_id)
        if candidate is None:
            return OperationResult.not_found(
                f"Professional {professional_id} is not a candidate for request {request_id}"
            )
        if not candidate.is_live():
            return OperationResult.invalid_state(f"Candidate already {candidate.status.value}")

        now = self._clock()
        if not await self._candidates.resolve(candidate.id, CandidateStatus.DECLINED, now, notes=reason):
            return OperationResult.invalid_state("Candidate no longer available")
        candidate.resolve(CandidateStatus.DECLINED, now, notes=reason)

        logger.info(
            "Professional %s declined request %s%s",
            professional_id, request_id, " (timeout)" if timed_out else "",
        )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message="Candidate declined",
            candidates=[candidate],
            events=[
                CandidateRejected(
                    request_id=request_id,
                    occurred_at=now,
                    professional_id=professional_id,
                    reason=reason,
                    timed_out=timed_out,
                )
            ],
        )


def _no_longer_available(message: str) -> OperationResult:
    return OperationResult(outcome=Outcome.NO_LONGER_AVAILABLE, message=message)
