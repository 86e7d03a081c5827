"""Use-case results — caller-visible outcomes, not exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from app.domain.entities.assignment import Assignment
from app.domain.entities.candidate import ProfessionalCandidate
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.events import DomainEvent


class Outcome(str, Enum):
    SUCCESS = "success"
    NOOP = "noop"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_STATE = "invalid_state"
    NO_LONGER_AVAILABLE = "no_longer_available"
    NO_ELIGIBLE_PROFESSIONALS = "no_eligible_professionals"


@dataclass
class OperationResult:
    """Outcome of one orchestrator operation plus the events it produced."""

    outcome: Outcome
    message: str = ""
    request: UrgentRequest | None = None
    assignment: Assignment | None = None
    candidates: list[ProfessionalCandidate] = field(default_factory=list)
    events: list[DomainEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.NOOP)

    @classmethod
    def not_found(cls, message: str) -> "OperationResult":
        return cls(outcome=Outcome.NOT_FOUND, message=message)

    @classmethod
    def invalid_state(cls, message: str, request: UrgentRequest | None = None) -> "OperationResult":
        return cls(outcome=Outcome.INVALID_STATE, message=message, request=request)
