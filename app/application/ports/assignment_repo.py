"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.assignment import Assignment


class AssignmentRepository(ABC):
    @abstractmethod
    async def save(self, assignment: Assignment) -> Assignment:
        """Persist a new assignment. At most one exists per request."""
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        ...

    @abstractmethod
    async def get_by_request(self, request_id: int) -> Assignment | None:
        ...

    @abstractmethod
    async def mark_completed(
        self, assignment_id: int, completed_at: datetime, completion_minutes: int
    ) -> bool:
        """Conditionally move an active assignment to completed."""
        ...

    @abstractmethod
    async def set_escrow(self, assignment_id: int, escrow_id: str) -> None:
        ...

    @abstractmethod
    async def mark_escrow_released(self, assignment_id: int, released_at: datetime) -> None:
        ...

    @abstractmethod
    async def list_awaiting_escrow(self) -> list[Assignment]:
        """Active assignments with an agreed price and no escrow yet, on requests still assigned."""
        ...

    @abstractmethod
    async def list_awaiting_release(self) -> list[Assignment]:
        """Completed assignments whose escrow has not been released yet."""
        ...
