"""CompleteAssignmentUseCase — the assigned professional closes the job."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.results import OperationResult, Outcome
from app.domain.events import AssignmentCompleted
from app.domain.value_objects.enums import RequestStatus

logger = logging.getLogger(__name__)

_ASSIGNED = frozenset({RequestStatus.ASSIGNED})


class CompleteAssignmentUseCase:
    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        assignment_repo: AssignmentRepository,
        clock: Clock = utc_now,
    ):
        self._requests = request_repo
        self._assignments = assignment_repo
        self._clock = clock

    async def execute(self, assignment_id: int, professional_id: int) -> OperationResult:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            return OperationResult.not_found(f"Assignment {assignment_id} not found")
        if assignment.professional_id != professional_id:
            return OperationResult(
                outcome=Outcome.FORBIDDEN,
                message="Only the assigned professional may complete this assignment",
                assignment=assignment,
            )
        if not assignment.is_active():
            return OperationResult(
                outcome=Outcome.INVALID_STATE,
                message=f"Assignment is {assignment.status.value}",
                assignment=assignment,
            )

        # A request cancelled after assignment cannot be completed
        if not await self._requests.compare_and_set_status(
            assignment.request_id, _ASSIGNED, RequestStatus.COMPLETED
        ):
            return OperationResult(
                outcome=Outcome.INVALID_STATE,
                message="Request is no longer assigned",
                assignment=assignment,
            )

        now = self._clock()
        assignment.complete(now)
        if not await self._assignments.mark_completed(assignment_id, now, assignment.completion_minutes):
            await self._requests.compare_and_set_status(
                assignment.request_id, frozenset({RequestStatus.COMPLETED}), RequestStatus.ASSIGNED
            )
            return OperationResult(
                outcome=Outcome.INVALID_STATE,
                message="Assignment already completed",
                assignment=assignment,
            )

        request = await self._requests.get_by_id(assignment.request_id)
        logger.info(
            "Assignment %s completed by professional %s after %d min",
            assignment_id, professional_id, assignment.completion_minutes,
        )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message="Assignment completed",
            request=request,
            assignment=assignment,
            events=[
                AssignmentCompleted(
                    request_id=assignment.request_id,
                    occurred_at=now,
                    assignment_id=assignment_id,
                    professional_id=professional_id,
                    requester_id=request.requester_id if request else 0,
                    escrow_id=assignment.escrow_id,
                )
            ],
        )
