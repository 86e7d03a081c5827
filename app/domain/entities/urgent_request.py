"""UrgentRequest entity — a time-critical service need posted by a client."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.errors import InvalidStateError
from app.domain.value_objects.enums import REQUEST_TRANSITIONS, RequestStatus, UrgencyLevel
from app.domain.value_objects.geo_point import GeoPoint


@dataclass
class UrgentRequest:
    id: int | None
    requester_id: int
    description: str
    location: GeoPoint
    urgency_level: UrgencyLevel = UrgencyLevel.HIGH
    service_category: str | None = None
    estimated_budget: float | None = None
    special_requirements: str | None = None
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime | None = None
    version: int = 0

    def can_transition_to(self, target: RequestStatus) -> bool:
        return target in REQUEST_TRANSITIONS[self.status]

    def transition_to(self, target: RequestStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStateError("UrgentRequest", self.status.value, target.value)
        self.status = target
        self.version += 1

    def is_open_for_candidates(self) -> bool:
        return self.status == RequestStatus.PENDING

    def is_owned_by(self, requester_id: int) -> bool:
        return self.requester_id == requester_id
