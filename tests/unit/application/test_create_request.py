"""Tests for CreateUrgentRequestUseCase."""

from __future__ import annotations

import pytest

from app.application.results import Outcome
from app.application.use_cases.create_request import CreateUrgentRequestUseCase
from app.domain.events import RequestCreated
from app.domain.value_objects.enums import RequestStatus, UrgencyLevel
from fakes import BA_CENTER, FakeRequestRepo


@pytest.mark.asyncio
async def test_create_persists_pending_request_and_emits_event(now, clock):
    repo = FakeRequestRepo()

    result = await CreateUrgentRequestUseCase(repo, clock).execute(
        requester_id=7,
        description="  Corte de luz en todo el departamento ",
        location=BA_CENTER,
        service_category=" Electricidad",
    )

    assert result.outcome == Outcome.SUCCESS
    stored = repo.requests[result.request.id]
    assert stored.status == RequestStatus.PENDING
    assert stored.urgency_level == UrgencyLevel.HIGH
    assert stored.service_category == "electricidad"
    assert stored.description == "Corte de luz en todo el departamento"
    assert stored.created_at == now
    (event,) = result.events
    assert isinstance(event, RequestCreated)
    assert event.request_id == result.request.id
