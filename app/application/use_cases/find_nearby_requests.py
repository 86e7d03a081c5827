"""FindNearbyRequestsUseCase — what a professional sees when browsing urgent work."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.candidate_repo import CandidateRepository
from app.application.ports.request_repo import UrgentRequestRepository
from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.policies.eligibility import is_eligible
from app.domain.policies.ranking import NearbyRequest, rank_requests
from app.domain.value_objects.dispatch_policy import DispatchPolicy
from app.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class FindNearbyRequestsUseCase:
    def __init__(
        self,
        request_repo: UrgentRequestRepository,
        candidate_repo: CandidateRepository,
        policy: DispatchPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self._requests = request_repo
        self._candidates = candidate_repo
        self._policy = policy or DispatchPolicy()
        self._clock = clock

    async def execute(
        self,
        origin: GeoPoint,
        radius_km: float,
        professional: ProfessionalSnapshot,
    ) -> list[NearbyRequest]:
        """Active requests around *origin* the professional is qualified for.

        The ``already_candidate`` flag only drives display; duplicate
        candidates are prevented when candidates are created.
        """
        since = self._clock() - self._policy.nearby_lookback
        active = await self._requests.list_active_since(since)
        own_request_ids = await self._candidates.request_ids_for_professional(professional.id)

        nearby: list[NearbyRequest] = []
        for request in active:
            distance = origin.haversine_km(request.location)
            if distance > radius_km:
                continue
            if not is_eligible(professional, request.service_category):
                continue
            nearby.append(
                NearbyRequest(
                    request=request,
                    distance_km=round(distance, 2),
                    already_candidate=request.id in own_request_ids,
                )
            )

        logger.debug(
            "Professional %s: %d of %d active requests within %.1f km",
            professional.id, len(nearby), len(active), radius_km,
        )
        return rank_requests(nearby)
