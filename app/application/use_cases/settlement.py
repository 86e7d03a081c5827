"""Escrow handling after acceptance and completion.

Runs strictly after the state transition is committed. A gateway failure is
logged and left for SettlementReconciler; it never touches request state.
"""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.notification_port import NotificationOutbox
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.ports.settlement_port import SettlementGateway
from app.application.use_cases.notifications import funds_released_message
from app.domain.entities.assignment import Assignment
from app.domain.errors import DownstreamUnavailableError
from app.domain.events import AssignmentCompleted, CandidateAccepted
from app.domain.value_objects.dispatch_policy import DispatchPolicy
from app.domain.value_objects.enums import EscrowStatus, RequestStatus

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        request_repo: UrgentRequestRepository,
        gateway: SettlementGateway,
        policy: DispatchPolicy | None = None,
        clock: Clock = utc_now,
        outbox: NotificationOutbox | None = None,
    ):
        self._assignments = assignment_repo
        self._requests = request_repo
        self._gateway = gateway
        self._outbox = outbox
        self._policy = policy or DispatchPolicy()
        self._clock = clock

    async def open_escrow(self, assignment: Assignment) -> str | None:
        """Hold the agreed price until ``assigned_at`` + release window."""
        if not assignment.needs_escrow():
            return assignment.escrow_id

        # A cancel may have landed since the accept committed
        request = await self._requests.get_by_id(assignment.request_id)
        if request is None or request.status != RequestStatus.ASSIGNED:
            logger.info(
                "Skipping escrow for assignment %s, request %s is no longer assigned",
                assignment.id, assignment.request_id,
            )
            return None

        deadline = assignment.assigned_at + self._policy.escrow_release_after
        try:
            escrow_id = await self._gateway.open_escrow(assignment.id, assignment.agreed_price, deadline)
        except DownstreamUnavailableError as exc:
            logger.warning("Escrow for assignment %s deferred: %s", assignment.id, exc)
            return None

        await self._assignments.set_escrow(assignment.id, escrow_id)
        assignment.escrow_id = escrow_id
        logger.info(
            "Escrow %s opened for assignment %s (%.2f, release by %s)",
            escrow_id, assignment.id, assignment.agreed_price, deadline.isoformat(),
        )
        return escrow_id

    async def release_escrow(self, assignment: Assignment) -> bool:
        if not assignment.awaits_release():
            return False

        try:
            status = await self._gateway.get_escrow_status(assignment.escrow_id)
            if status == EscrowStatus.PENDING:
                await self._gateway.release_escrow(assignment.escrow_id)
        except DownstreamUnavailableError as exc:
            logger.warning("Escrow release for assignment %s deferred: %s", assignment.id, exc)
            return False

        now = self._clock()
        await self._assignments.mark_escrow_released(assignment.id, now)
        assignment.escrow_released_at = now
        if status == EscrowStatus.PENDING:
            logger.info("Escrow %s released for assignment %s", assignment.escrow_id, assignment.id)
            if self._outbox is not None:
                await self._outbox.enqueue(
                    funds_released_message(
                        assignment.professional_id, assignment.request_id, assignment.agreed_price
                    )
                )
            return True
        logger.info("Escrow %s already %s, nothing to release", assignment.escrow_id, status.value)
        return False

    # ─── Event handlers ──────────────────────────────────────────────────────

    async def on_candidate_accepted(self, event: CandidateAccepted) -> None:
        if event.agreed_price is None:
            return
        assignment = await self._assignments.get_by_id(event.assignment_id)
        if assignment is None:
            logger.error("Accepted event for unknown assignment %s", event.assignment_id)
            return
        await self.open_escrow(assignment)

    async def on_assignment_completed(self, event: AssignmentCompleted) -> None:
        assignment = await self._assignments.get_by_id(event.assignment_id)
        if assignment is None:
            logger.error("Completed event for unknown assignment %s", event.assignment_id)
            return
        await self.release_escrow(assignment)


class SettlementReconciler:
    """Retry escrow work the event handlers had to defer."""

    def __init__(self, assignment_repo: AssignmentRepository, settlement: SettlementService):
        self._assignments = assignment_repo
        self._settlement = settlement

    async def run_once(self) -> dict[str, int]:
        opened = 0
        for assignment in await self._assignments.list_awaiting_escrow():
            if await self._settlement.open_escrow(assignment):
                opened += 1

        released = 0
        for assignment in await self._assignments.list_awaiting_release():
            if await self._settlement.release_escrow(assignment):
                released += 1

        if opened or released:
            logger.info("Settlement reconcile: %d escrows opened, %d released", opened, released)
        return {"opened": opened, "released": released}
