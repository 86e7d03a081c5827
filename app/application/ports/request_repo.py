"""Port interface for urgent request persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.urgent_request import UrgentRequest
from app.domain.value_objects.enums import RequestStatus


class UrgentRequestRepository(ABC):
    @abstractmethod
    async def save(self, request: UrgentRequest) -> UrgentRequest:
        ...

    @abstractmethod
    async def get_by_id(self, request_id: int) -> UrgentRequest | None:
        ...

    @abstractmethod
    async def get_for_update(self, request_id: int) -> UrgentRequest | None:
        """Load the request and hold its row lock until the transaction ends.

        Serializes dispatch runs and cancellation for the same request.
        """
        ...

    @abstractmethod
    async def compare_and_set_status(
        self,
        request_id: int,
        expected: frozenset[RequestStatus],
        new_status: RequestStatus,
    ) -> bool:
        """Atomically move the request to *new_status* if its status is in *expected*.

        Must be a single conditional UPDATE (bumping the version) so that
        concurrent callers see exactly one success. Returns False when the
        row was not in an expected status.
        """
        ...

    @abstractmethod
    async def list_active_since(self, since: datetime) -> list[UrgentRequest]:
        """Pending or assigned requests created at or after *since*."""
        ...
