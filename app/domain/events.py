"""Domain events emitted by the dispatch use cases.

Events are handed to the event bus only after the transaction that produced
them has been committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.value_objects.enums import UrgencyLevel


@dataclass(frozen=True)
class DomainEvent:
    request_id: int
    occurred_at: datetime


@dataclass(frozen=True)
class RequestCreated(DomainEvent):
    requester_id: int


@dataclass(frozen=True)
class CandidateProposed(DomainEvent):
    professional_id: int
    distance_km: float
    estimated_arrival_minutes: int
    urgency_level: UrgencyLevel
    description: str
    suggested_price: float | None = None


@dataclass(frozen=True)
class CandidateAccepted(DomainEvent):
    professional_id: int
    requester_id: int
    assignment_id: int
    agreed_price: float | None = None


@dataclass(frozen=True)
class CandidatesSuperseded(DomainEvent):
    professional_ids: tuple[int, ...] = field(default=())
    reason: str = "taken"


@dataclass(frozen=True)
class CandidateRejected(DomainEvent):
    professional_id: int
    reason: str | None = None
    timed_out: bool = False


@dataclass(frozen=True)
class RequestCancelled(DomainEvent):
    requester_id: int
    professional_ids: tuple[int, ...] = field(default=())


@dataclass(frozen=True)
class AssignmentCompleted(DomainEvent):
    assignment_id: int
    professional_id: int
    requester_id: int
    escrow_id: str | None = None
