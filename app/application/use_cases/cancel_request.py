"""CancelUrgentRequestUseCase — requester withdraws a request."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.candidate_repo import CandidateRepository
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.results import OperationResult, Outcome
from app.domain.events import CandidatesSuperseded, RequestCancelled
from app.domain.value_objects.enums import CandidateStatus, RequestStatus, request_sources_for

logger = logging.getLogger(__name__)


class CancelUrgentRequestUseCase:
    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        clock: Clock = utc_now,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._clock = clock

    async def execute(self, request_id: int, requester_id: int) -> OperationResult:
        # Row lock keeps an in-flight dispatch from adding candidates underneath us
        request = await self._requests.get_for_update(request_id)
        if request is None:
            return OperationResult.not_found(f"Urgent request {request_id} not found")
        if not request.is_owned_by(requester_id):
            return OperationResult(
                outcome=Outcome.FORBIDDEN,
                message="Only the requester may cancel this request",
                request=request,
            )
        if not request.can_transition_to(RequestStatus.CANCELLED):
            return OperationResult.invalid_state(
                f"Request is {request.status.value}, cannot cancel", request=request
            )

        cancelled = await self._requests.compare_and_set_status(
            request_id, request_sources_for(RequestStatus.CANCELLED), RequestStatus.CANCELLED
        )
        if not cancelled:
            return OperationResult.invalid_state("Request changed state, cannot cancel", request=request)
        was_assigned = request.status == RequestStatus.ASSIGNED
        request.transition_to(RequestStatus.CANCELLED)

        now = self._clock()
        superseded = await self._candidates.supersede_available(request_id, now)
        closed = tuple(c.professional_id for c in superseded)
        notified = closed
        if was_assigned:
            # Assignment holder hears about it too
            notified += tuple(
                c.professional_id
                for c in await self._candidates.list_by_request(request_id)
                if c.status == CandidateStatus.ACCEPTED
            )

        logger.info(
            "Request %s cancelled by requester %s, %d live candidates closed",
            request_id, requester_id, len(superseded),
        )

        events = [
            RequestCancelled(
                request_id=request_id,
                occurred_at=now,
                requester_id=requester_id,
                professional_ids=notified,
            )
        ]
        if superseded:
            events.append(
                CandidatesSuperseded(
                    request_id=request_id,
                    occurred_at=now,
                    professional_ids=closed,
                    reason="cancelled",
                )
            )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message="Request cancelled",
            request=request,
            candidates=superseded,
            events=events,
        )
