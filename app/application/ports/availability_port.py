"""Port interface for the external availability (calendar) store."""

from abc import ABC, abstractmethod
from datetime import datetime


class AvailabilityPort(ABC):
    @abstractmethod
    async def has_open_slot(self, professional_id: int, start: datetime, end: datetime) -> bool:
        """True if the professional has at least one open slot in [start, end].

        May raise on backend failure; callers decide the degraded policy.
        """
        ...
