"""Dispatch use cases — propose candidates for an urgent request.

DispatchRequestUseCase runs when a request is created (or re-triggered by an
operator); ReplenishCandidatesUseCase tops candidates up after a rejection or
an offer timeout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.application.clock import Clock, utc_now
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.candidate_repo import CandidateRepository
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.results import OperationResult, Outcome
from app.application.use_cases.find_professionals import ProfessionalFinder
from app.application.use_cases.pricing import SuggestPriceUseCase
from app.domain.entities.candidate import ProfessionalCandidate
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.events import CandidateProposed
from app.domain.policies.replenishment import (
    candidates_needed,
    excluded_professionals,
    has_enough_live,
    live_count,
)
from app.domain.policies.scoring import estimate_arrival_minutes
from app.domain.value_objects.dispatch_policy import DispatchPolicy
from app.domain.value_objects.enums import CandidateStatus, RequestStatus

logger = logging.getLogger(__name__)


@dataclass
class ProposalBatch:
    candidates: list[ProfessionalCandidate] = field(default_factory=list)
    events: list[CandidateProposed] = field(default_factory=list)
    request_closed: bool = False


class CandidateProposer:
    """Create ``available`` candidates for the best-ranked professionals."""

    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        finder: ProfessionalFinder,
        pricing: SuggestPriceUseCase,
        clock: Clock = utc_now,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._finder = finder
        self._pricing = pricing
        self._clock = clock

    async def propose(
        self,
        request: UrgentRequest,
        radius_km: float,
        slots: int,
        exclude: frozenset[int],
    ) -> ProposalBatch:
        if slots <= 0:
            return ProposalBatch()

        ranked = await self._finder.find_candidates(
            request.location, request.service_category, radius_km, exclude=exclude
        )
        if not ranked:
            return ProposalBatch()

        pricing = await self._pricing.load_config()
        suggested = pricing.suggest(
            request.service_category, request.urgency_level, request.estimated_budget
        )

        now = self._clock()
        batch = ProposalBatch()
        for match in ranked[:slots]:
            distance = round(match.distance_km, 2)
            candidate = await self._candidates.add(
                ProfessionalCandidate(
                    id=None,
                    request_id=request.id,
                    professional_id=match.professional_id,
                    distance_km=distance,
                    estimated_arrival_minutes=estimate_arrival_minutes(match.distance_km),
                    status=CandidateStatus.AVAILABLE,
                    proposed_at=now,
                )
            )
            batch.candidates.append(candidate)

        # A cancel or accept may have landed while the finder was running
        current = await self._requests.get_by_id(request.id)
        if current is None or not current.is_open_for_candidates():
            superseded = await self._candidates.supersede_available(request.id, now)
            logger.info(
                "Request %s closed during dispatch, superseded %d fresh candidates",
                request.id, len(superseded),
            )
            return ProposalBatch(request_closed=True)

        batch.events = [
            CandidateProposed(
                request_id=request.id,
                occurred_at=now,
                professional_id=c.professional_id,
                distance_km=c.distance_km,
                estimated_arrival_minutes=c.estimated_arrival_minutes,
                urgency_level=request.urgency_level,
                description=request.description,
                suggested_price=suggested,
            )
            for c in batch.candidates
        ]
        return batch


class DispatchRequestUseCase:
    """Idempotent initial dispatch of an urgent request."""

    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        assignment_repo: AssignmentRepository,
        proposer: CandidateProposer,
        policy: DispatchPolicy | None = None,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._assignments = assignment_repo
        self._proposer = proposer
        self._policy = policy or DispatchPolicy()

    async def execute(self, request_id: int, radius_km: float | None = None) -> OperationResult:
        """Propose up to ``max_candidates`` professionals.

        Pipeline:
        1. Already assigned → success, no side effects
        2. Closed (cancelled / completed) → invalid state
        3. Enough live candidates already → no-op
        4. Finder at ``radius_km`` (default: the dispatch radius), excluding existing candidates
        5. Persist candidates and emit one proposal event each
        """
        if radius_km is None:
            radius_km = self._policy.dispatch_radius_km

        request = await self._requests.get_for_update(request_id)
        if request is None:
            return OperationResult.not_found(f"Urgent request {request_id} not found")

        if request.status == RequestStatus.ASSIGNED or await self._assignments.get_by_request(request_id):
            return OperationResult(outcome=Outcome.NOOP, message="Request already assigned", request=request)

        if request.status != RequestStatus.PENDING:
            return OperationResult.invalid_state(
                f"Request is {request.status.value}, cannot dispatch", request=request
            )

        existing = await self._candidates.list_by_request(request_id)
        if has_enough_live(existing, self._policy.min_live_candidates):
            return OperationResult(
                outcome=Outcome.NOOP,
                message=f"{live_count(existing)} candidates already waiting",
                request=request,
                candidates=[c for c in existing if c.is_live()],
            )

        batch = await self._proposer.propose(
            request,
            radius_km=radius_km,
            slots=self._policy.max_candidates - live_count(existing),
            exclude=excluded_professionals(existing),
        )

        if batch.request_closed:
            return OperationResult(outcome=Outcome.NOOP, message="Request closed during dispatch", request=request)

        if not batch.candidates and live_count(existing) == 0:
            logger.warning(
                "No eligible professionals within %.1f km for request %s",
                radius_km, request_id,
            )
            return OperationResult(
                outcome=Outcome.NO_ELIGIBLE_PROFESSIONALS,
                message="No professionals available",
                request=request,
            )

        logger.info("Dispatch for request %s: %d candidates proposed", request_id, len(batch.candidates))
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message=f"Proposed {len(batch.candidates)} candidate professionals",
            request=request,
            candidates=batch.candidates,
            events=list(batch.events),
        )


class ReplenishCandidatesUseCase:
    """Top a pending request back up to the live-candidate floor at a wider radius."""

    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        proposer: CandidateProposer,
        policy: DispatchPolicy | None = None,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._proposer = proposer
        self._policy = policy or DispatchPolicy()

    async def execute(self, request_id: int) -> OperationResult:
        request = await self._requests.get_for_update(request_id)
        if request is None:
            return OperationResult.not_found(f"Urgent request {request_id} not found")
        if not request.is_open_for_candidates():
            return OperationResult(outcome=Outcome.NOOP, message="Request no longer pending", request=request)

        existing = await self._candidates.list_by_request(request_id)
        needed = candidates_needed(existing, self._policy.min_live_candidates)
        if needed == 0:
            return OperationResult(outcome=Outcome.NOOP, message="Live candidate floor already met", request=request)

        batch = await self._proposer.propose(
            request,
            radius_km=self._policy.redispatch_radius_km,
            slots=needed,
            exclude=excluded_professionals(existing),
        )

        if batch.request_closed:
            return OperationResult(outcome=Outcome.NOOP, message="Request closed during re-dispatch", request=request)

        if not batch.candidates and live_count(existing) == 0:
            logger.warning(
                "Re-dispatch found nobody within %.1f km for request %s; manual dispatch needed",
                self._policy.redispatch_radius_km, request_id,
            )
            return OperationResult(
                outcome=Outcome.NO_ELIGIBLE_PROFESSIONALS,
                message="No further professionals available",
                request=request,
            )

        logger.info(
            "Re-dispatch for request %s: %d new candidates (%d were needed)",
            request_id, len(batch.candidates), needed,
        )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message=f"Added {len(batch.candidates)} candidate professionals",
            request=request,
            candidates=batch.candidates,
            events=list(batch.events),
        )
