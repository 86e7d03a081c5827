"""Port interface for the professional profile read store."""

from abc import ABC, abstractmethod

from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.value_objects.geo_point import BoundingBox


class ProfessionalDirectory(ABC):
    @abstractmethod
    async def list_available(self, area: BoundingBox) -> list[ProfessionalSnapshot]:
        """Available, located, unblocked professionals inside *area*.

        The box is a coarse pre-filter; callers still check exact distance.
        """
        ...

    @abstractmethod
    async def get_by_id(self, professional_id: int) -> ProfessionalSnapshot | None:
        ...
