"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class UrgencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Sort weight: high > medium > low."""
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    UrgencyLevel.LOW: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.HIGH: 3,
}


class RequestStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    def is_terminal(self) -> bool:
        return self in (RequestStatus.CANCELLED, RequestStatus.COMPLETED)


class CandidateStatus(str, Enum):
    AVAILABLE = "available"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    SUPERSEDED = "superseded"

    def is_terminal(self) -> bool:
        return self != CandidateStatus.AVAILABLE


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class EscrowStatus(str, Enum):
    PENDING = "pending"
    RELEASED = "released"
    REFUNDED = "refunded"


class CredentialType(str, Enum):
    PUNCTUALITY = "puntualidad"
    RATING = "calificaciones"
    COMPLETED_JOBS = "trabajos_completados"
    IDENTITY_VERIFIED = "verificado"


class NotificationChannel(str, Enum):
    IN_APP = "in_app"
    PUSH = "push"
    EMAIL = "email"
    SMS = "sms"


# Allowed request transitions: source → targets
REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.ASSIGNED, RequestStatus.CANCELLED}),
    RequestStatus.ASSIGNED: frozenset({RequestStatus.COMPLETED, RequestStatus.CANCELLED}),
    RequestStatus.CANCELLED: frozenset(),
    RequestStatus.COMPLETED: frozenset(),
}


def request_sources_for(target: RequestStatus) -> frozenset[RequestStatus]:
    """All statuses a request may legally move to *target* from."""
    return frozenset(src for src, targets in REQUEST_TRANSITIONS.items() if target in targets)
