"""Port interface for the external settlement (escrow) service."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.value_objects.enums import EscrowStatus


class SettlementGateway(ABC):
    @abstractmethod
    async def open_escrow(self, reference_id: int, amount: float, release_deadline: datetime) -> str:
        """Hold *amount* against the assignment and return the escrow id."""
        ...

    @abstractmethod
    async def get_escrow_status(self, escrow_id: str) -> EscrowStatus:
        ...

    @abstractmethod
    async def release_escrow(self, escrow_id: str) -> None:
        ...
