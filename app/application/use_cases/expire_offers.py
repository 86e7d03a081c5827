"""ExpireStaleOffersUseCase — decline offers nobody answered in time."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.candidate_repo import CandidateRepository
from app.application.results import OperationResult, Outcome
from app.application.use_cases.respond_to_request import RejectCandidateUseCase
from app.domain.value_objects.dispatch_policy import DispatchPolicy

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


class ExpireStaleOffersUseCase:
    """Treat an unanswered offer past its TTL as a rejection.

    Each expiry emits ``CandidateRejected(timed_out=True)`` so the request
    is topped up the same way as after an explicit decline.
    """

    def __init__(
        self,
        candidate_repo: CandidateRepository,
        rejecter: RejectCandidateUseCase,
        policy: DispatchPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self._candidates = candidate_repo
        self._rejecter = rejecter
        self._policy = policy or DispatchPolicy()
        self._clock = clock

    async def execute(self) -> OperationResult:
        cutoff = self._clock() - self._policy.offer_ttl
        stale = await self._candidates.list_stale(cutoff)

        result = OperationResult(outcome=Outcome.NOOP, message="No stale offers")
        for candidate in stale:
            declined = await self._rejecter.execute(
                candidate.request_id,
                candidate.professional_id,
                reason=TIMEOUT_REASON,
                timed_out=True,
            )
            # Answered between the scan and the update
            if declined.outcome != Outcome.SUCCESS:
                continue
            result.candidates.extend(declined.candidates)
            result.events.extend(declined.events)

        if result.candidates:
            result.outcome = Outcome.SUCCESS
            result.message = f"Expired {len(result.candidates)} offers"
            logger.info("Expired %d stale offers older than %s", len(result.candidates), cutoff)
        return result
