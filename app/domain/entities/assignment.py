"""Assignment entity — the binding commitment once a candidate accepts."""

import math
from dataclasses import dataclass
from datetime import datetime

from app.domain.errors import InvalidStateError
from app.domain.value_objects.enums import AssignmentStatus


@dataclass
class Assignment:
    id: int | None
    request_id: int
    professional_id: int
    assigned_at: datetime
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    agreed_price: float | None = None
    notes: str | None = None
    completed_at: datetime | None = None
    completion_minutes: int | None = None
    escrow_id: str | None = None
    escrow_released_at: datetime | None = None

    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def elapsed_minutes(self, until: datetime) -> int:
        seconds = (until - self.assigned_at).total_seconds()
        return max(0, math.floor(seconds / 60 + 0.5))

    def complete(self, at: datetime) -> None:
        if not self.is_active():
            raise InvalidStateError("Assignment", self.status.value, AssignmentStatus.COMPLETED.value)
        self.status = AssignmentStatus.COMPLETED
        self.completed_at = at
        self.completion_minutes = self.elapsed_minutes(at)

    def needs_escrow(self) -> bool:
        return self.agreed_price is not None and self.escrow_id is None

    def awaits_release(self) -> bool:
        return (
            self.status == AssignmentStatus.COMPLETED
            and self.escrow_id is not None
            and self.escrow_released_at is None
        )
