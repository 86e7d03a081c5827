"""Urgent request endpoints — create, dispatch, respond, cancel, complete."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import (
    SqlAssignmentRepository,
    SqlCandidateRepository,
    SqlProfessionalDirectory,
    SqlUrgentRequestRepository,
)
from app.application.event_bus import EventBus
from app.application.results import OperationResult, Outcome
from app.application.use_cases.cancel_request import CancelUrgentRequestUseCase
from app.application.use_cases.complete_assignment import CompleteAssignmentUseCase
from app.application.use_cases.create_request import CreateUrgentRequestUseCase
from app.application.use_cases.dispatch_request import DispatchRequestUseCase
from app.application.use_cases.find_nearby_requests import FindNearbyRequestsUseCase
from app.application.use_cases.respond_to_request import AcceptCandidateUseCase, RejectCandidateUseCase
from app.domain.entities.assignment import Assignment
from app.domain.entities.candidate import ProfessionalCandidate
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.value_objects.enums import UrgencyLevel
from app.domain.value_objects.geo_point import GeoPoint
from app.infrastructure.api.dependencies import (
    get_accept_uc,
    get_assignment_repo,
    get_cancel_uc,
    get_candidate_repo,
    get_complete_uc,
    get_create_request_uc,
    get_dispatch_uc,
    get_event_bus,
    get_nearby_uc,
    get_professional_directory,
    get_reject_uc,
    get_request_repo,
)

router = APIRouter(prefix="/urgent-requests", tags=["urgent-requests"])
assignments_router = APIRouter(prefix="/urgent-assignments", tags=["urgent-requests"])

# ── Request schemas ─────────────────────────────────────────────────


class CreateUrgentRequestBody(BaseModel):
    requester_id: int
    description: str = Field(min_length=1, max_length=2000)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    urgency_level: UrgencyLevel = UrgencyLevel.HIGH
    service_category: str | None = Field(default=None, max_length=100)
    estimated_budget: float | None = Field(default=None, ge=0)
    special_requirements: str | None = Field(default=None, max_length=2000)


class AcceptBody(BaseModel):
    professional_id: int
    proposed_price: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=1000)


class RejectBody(BaseModel):
    professional_id: int
    reason: str | None = Field(default=None, max_length=1000)


class DispatchBody(BaseModel):
    radius_km: float | None = Field(default=None, gt=0, le=100)


class CancelBody(BaseModel):
    requester_id: int


class CompleteBody(BaseModel):
    professional_id: int


# ── Helpers ─────────────────────────────────────────────────────────

_HTTP_STATUS = {
    Outcome.NOT_FOUND: 404,
    Outcome.FORBIDDEN: 403,
    Outcome.INVALID_STATE: 409,
    Outcome.NO_LONGER_AVAILABLE: 409,
}


async def _finish(
    result: OperationResult,
    session: AsyncSession,
    background: BackgroundTasks,
    bus: EventBus,
) -> dict:
    """Commit, schedule event delivery, and map the outcome to a response."""
    if result.outcome in _HTTP_STATUS:
        await session.rollback()
        raise HTTPException(
            status_code=_HTTP_STATUS[result.outcome],
            detail={"outcome": result.outcome.value, "message": result.message},
        )

    await session.commit()
    if result.events:
        background.add_task(bus.publish_all, list(result.events))

    body: dict = {"outcome": result.outcome.value, "message": result.message}
    if result.request is not None:
        body["request"] = _serialize_request(result.request)
    if result.assignment is not None:
        body["assignment"] = _serialize_assignment(result.assignment)
    if result.candidates:
        body["candidates"] = [_serialize_candidate(c) for c in result.candidates]
    return body


def _serialize_request(r: UrgentRequest) -> dict:
    return {
        "id": r.id,
        "requester_id": r.requester_id,
        "description": r.description,
        "latitude": r.location.latitude,
        "longitude": r.location.longitude,
        "urgency_level": r.urgency_level.value,
        "service_category": r.service_category,
        "estimated_budget": r.estimated_budget,
        "special_requirements": r.special_requirements,
        "status": r.status.value,
        "version": r.version,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def _serialize_candidate(c: ProfessionalCandidate) -> dict:
    return {
        "id": c.id,
        "professional_id": c.professional_id,
        "distance_km": c.distance_km,
        "estimated_arrival_minutes": c.estimated_arrival_minutes,
        "status": c.status.value,
        "proposed_price": c.proposed_price,
        "notes": c.notes,
        "proposed_at": c.proposed_at.isoformat() if c.proposed_at else None,
        "responded_at": c.responded_at.isoformat() if c.responded_at else None,
    }


def _serialize_assignment(a: Assignment) -> dict:
    return {
        "id": a.id,
        "request_id": a.request_id,
        "professional_id": a.professional_id,
        "status": a.status.value,
        "agreed_price": a.agreed_price,
        "assigned_at": a.assigned_at.isoformat(),
        "completed_at": a.completed_at.isoformat() if a.completed_at else None,
        "completion_minutes": a.completion_minutes,
        "escrow_id": a.escrow_id,
    }


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("", status_code=201)
async def create_urgent_request(
    body: CreateUrgentRequestBody,
    background: BackgroundTasks,
    uc: CreateUrgentRequestUseCase = Depends(get_create_request_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    """Create a request; dispatch runs in the background once it is committed."""
    result = await uc.execute(
        requester_id=body.requester_id,
        description=body.description,
        location=GeoPoint(latitude=body.latitude, longitude=body.longitude),
        urgency_level=body.urgency_level,
        service_category=body.service_category,
        estimated_budget=body.estimated_budget,
        special_requirements=body.special_requirements,
    )
    return await _finish(result, session, background, bus)


@router.get("/nearby")
async def nearby_requests(
    professional_id: int,
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    radius_km: float = Query(default=15.0, gt=0, le=100),
    uc: FindNearbyRequestsUseCase = Depends(get_nearby_uc),
    directory: SqlProfessionalDirectory = Depends(get_professional_directory),
):
    """Active urgent requests around a professional, most urgent first."""
    professional = await directory.get_by_id(professional_id)
    if professional is None:
        raise HTTPException(status_code=404, detail="Professional not found")

    results = await uc.execute(GeoPoint(latitude=latitude, longitude=longitude), radius_km, professional)
    return {
        "total": len(results),
        "requests": [
            {
                **_serialize_request(n.request),
                "distance_km": n.distance_km,
                "already_candidate": n.already_candidate,
            }
            for n in results
        ],
    }


@router.get("/{request_id}")
async def get_urgent_request(
    request_id: int,
    requests: SqlUrgentRequestRepository = Depends(get_request_repo),
    candidates: SqlCandidateRepository = Depends(get_candidate_repo),
    assignments: SqlAssignmentRepository = Depends(get_assignment_repo),
):
    """Request detail with its candidates and assignment."""
    request = await requests.get_by_id(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Urgent request not found")

    assignment = await assignments.get_by_request(request_id)
    return {
        **_serialize_request(request),
        "candidates": [_serialize_candidate(c) for c in await candidates.list_by_request(request_id)],
        "assignment": _serialize_assignment(assignment) if assignment else None,
    }


@router.post("/{request_id}/dispatch")
async def dispatch_urgent_request(
    request_id: int,
    background: BackgroundTasks,
    body: DispatchBody | None = None,
    uc: DispatchRequestUseCase = Depends(get_dispatch_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    """Manually (re)trigger dispatch. Safe to retry, optionally with a wider radius."""
    result = await uc.execute(request_id, radius_km=body.radius_km if body else None)
    return await _finish(result, session, background, bus)


@router.post("/{request_id}/accept")
async def accept_urgent_request(
    request_id: int,
    body: AcceptBody,
    background: BackgroundTasks,
    uc: AcceptCandidateUseCase = Depends(get_accept_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.execute(request_id, body.professional_id, body.proposed_price, body.notes)
    return await _finish(result, session, background, bus)


@router.post("/{request_id}/reject")
async def reject_urgent_request(
    request_id: int,
    body: RejectBody,
    background: BackgroundTasks,
    uc: RejectCandidateUseCase = Depends(get_reject_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.execute(request_id, body.professional_id, body.reason)
    return await _finish(result, session, background, bus)


@router.post("/{request_id}/cancel")
async def cancel_urgent_request(
    request_id: int,
    body: CancelBody,
    background: BackgroundTasks,
    uc: CancelUrgentRequestUseCase = Depends(get_cancel_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.execute(request_id, body.requester_id)
    return await _finish(result, session, background, bus)


@assignments_router.post("/{assignment_id}/complete")
async def complete_urgent_assignment(
    assignment_id: int,
    body: CompleteBody,
    background: BackgroundTasks,
    uc: CompleteAssignmentUseCase = Depends(get_complete_uc),
    bus: EventBus = Depends(get_event_bus),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.execute(assignment_id, body.professional_id)
    return await _finish(result, session, background, bus)
