"""Tests for domain enums and the request transition table."""

from app.domain.value_objects.enums import (
    CandidateStatus,
    RequestStatus,
    UrgencyLevel,
    request_sources_for,
)


def test_urgency_values():
    assert UrgencyLevel.LOW.value == "low"
    assert UrgencyLevel.MEDIUM.value == "medium"
    assert UrgencyLevel.HIGH.value == "high"


def test_urgency_rank_order():
    assert UrgencyLevel.HIGH.rank > UrgencyLevel.MEDIUM.rank > UrgencyLevel.LOW.rank


def test_terminal_request_statuses():
    assert RequestStatus.CANCELLED.is_terminal()
    assert RequestStatus.COMPLETED.is_terminal()
    assert not RequestStatus.PENDING.is_terminal()
    assert not RequestStatus.ASSIGNED.is_terminal()


def test_only_available_candidate_is_live():
    assert not CandidateStatus.AVAILABLE.is_terminal()
    for status in (CandidateStatus.ACCEPTED, CandidateStatus.DECLINED, CandidateStatus.SUPERSEDED):
        assert status.is_terminal()


def test_cancel_allowed_from_pending_and_assigned():
    assert request_sources_for(RequestStatus.CANCELLED) == frozenset(
        {RequestStatus.PENDING, RequestStatus.ASSIGNED}
    )


def test_complete_only_from_assigned():
    assert request_sources_for(RequestStatus.COMPLETED) == frozenset({RequestStatus.ASSIGNED})


def test_nothing_returns_to_pending():
    assert request_sources_for(RequestStatus.PENDING) == frozenset()
