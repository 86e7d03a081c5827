"""CreateUrgentRequestUseCase — record a new urgent request."""

from __future__ import annotations

import logging

from app.application.clock import Clock, utc_now
from app.application.ports.request_repo import UrgentRequestRepository
from app.application.results import OperationResult, Outcome
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.events import RequestCreated
from app.domain.value_objects.enums import RequestStatus, UrgencyLevel
from app.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class CreateUrgentRequestUseCase:
    def __init__(self, request_repo: UrgentRequestRepository, clock: Clock = utc_now):
        self._requests = request_repo
        self._clock = clock

    async def execute(
        self,
        requester_id: int,
        description: str,
        location: GeoPoint,
        urgency_level: UrgencyLevel = UrgencyLevel.HIGH,
        service_category: str | None = None,
        estimated_budget: float | None = None,
        special_requirements: str | None = None,
    ) -> OperationResult:
        """Persist the request as ``pending``; Dispatch runs off the emitted event."""
        now = self._clock()
        request = UrgentRequest(
            id=None,
            requester_id=requester_id,
            description=description.strip(),
            location=location,
            urgency_level=urgency_level,
            service_category=service_category.strip().lower() if service_category else None,
            estimated_budget=estimated_budget,
            special_requirements=special_requirements,
            status=RequestStatus.PENDING,
            created_at=now,
        )
        await self._requests.save(request)

        logger.info(
            "Urgent request %s created by requester %s (urgency=%s, category=%s)",
            request.id, requester_id, urgency_level.value, request.service_category,
        )
        return OperationResult(
            outcome=Outcome.SUCCESS,
            message="Urgent request created",
            request=request,
            events=[RequestCreated(request_id=request.id, occurred_at=now, requester_id=requester_id)],
        )
