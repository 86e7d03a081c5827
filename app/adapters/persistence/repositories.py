"""SQLAlchemy repository implementations.

Status changes that decide races are single conditional UPDATEs; the caller
learns whether it won from the affected row count.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.adapters.persistence.models import (
    AvailabilitySlotModel,
    ProfessionalProfileModel,
    UrgentAssignmentModel,
    UrgentCandidateModel,
    UrgentPricingRuleModel,
    UrgentRequestModel,
)
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.availability_port import AvailabilityPort
from app.application.ports.candidate_repo import CandidateRepository
from app.application.ports.pricing_repo import PricingRuleRepository
from app.application.ports.professional_directory import ProfessionalDirectory
from app.application.ports.request_repo import UrgentRequestRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.candidate import ProfessionalCandidate
from app.domain.entities.professional import ProfessionalSnapshot
from app.domain.entities.urgent_request import UrgentRequest
from app.domain.value_objects.enums import (
    AssignmentStatus,
    CandidateStatus,
    RequestStatus,
    UrgencyLevel,
)
from app.domain.value_objects.geo_point import BoundingBox, GeoPoint
from app.domain.value_objects.pricing import PricingRule

_ACTIVE_REQUEST_STATUSES = (RequestStatus.PENDING.value, RequestStatus.ASSIGNED.value)

# ─── Mappers ─────────────────────────────────────────────────────────


def _request_to_domain(m: UrgentRequestModel) -> UrgentRequest:
    return UrgentRequest(
        id=m.id,
        requester_id=m.requester_id,
        description=m.description,
        location=GeoPoint(latitude=m.latitude, longitude=m.longitude),
        urgency_level=UrgencyLevel(m.urgency_level),
        service_category=m.service_category,
        estimated_budget=m.estimated_budget,
        special_requirements=m.special_requirements,
        status=RequestStatus(m.status),
        created_at=m.created_at,
        version=m.version,
    )


def _candidate_to_domain(m: UrgentCandidateModel) -> ProfessionalCandidate:
    return ProfessionalCandidate(
        id=m.id,
        request_id=m.request_id,
        professional_id=m.professional_id,
        distance_km=m.distance_km,
        estimated_arrival_minutes=m.estimated_arrival_minutes,
        status=CandidateStatus(m.status),
        proposed_price=m.proposed_price,
        notes=m.notes,
        proposed_at=m.proposed_at,
        responded_at=m.responded_at,
    )


def _assignment_to_domain(m: UrgentAssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        request_id=m.request_id,
        professional_id=m.professional_id,
        assigned_at=m.assigned_at,
        status=AssignmentStatus(m.status),
        agreed_price=m.agreed_price,
        notes=m.notes,
        completed_at=m.completed_at,
        completion_minutes=m.completion_minutes,
        escrow_id=m.escrow_id,
        escrow_released_at=m.escrow_released_at,
    )


def _professional_to_domain(m: ProfessionalProfileModel) -> ProfessionalSnapshot:
    return ProfessionalSnapshot(
        id=m.id,
        name=m.name,
        location=GeoPoint(latitude=m.latitude, longitude=m.longitude),
        specialties=tuple(m.specialties or ()),
        is_available=m.is_available and not m.is_blocked,
        reputation_score=m.reputation_score,
        credentials=tuple(m.credentials or ()),
        has_description=bool(m.description and m.description.strip()),
        has_photo=bool(m.photo_url),
        years_experience=m.years_experience,
        is_verified=m.is_verified,
    )


def _rule_to_domain(m: UrgentPricingRuleModel) -> PricingRule:
    return PricingRule(
        service_category=m.service_category,
        urgency_level=UrgencyLevel(m.urgency_level),
        base_price=m.base_price,
        urgency_multiplier=m.urgency_multiplier,
        active=m.active,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlUrgentRequestRepository(UrgentRequestRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, request: UrgentRequest) -> UrgentRequest:
        m = UrgentRequestModel(
            requester_id=request.requester_id,
            description=request.description,
            latitude=request.location.latitude,
            longitude=request.location.longitude,
            urgency_level=request.urgency_level.value,
            service_category=request.service_category,
            estimated_budget=request.estimated_budget,
            special_requirements=request.special_requirements,
            status=request.status.value,
            version=request.version,
            created_at=request.created_at or datetime.now(timezone.utc),
        )
        self._s.add(m)
        await self._s.flush()
        request.id = m.id
        request.created_at = m.created_at
        return request

    async def get_by_id(self, request_id: int) -> UrgentRequest | None:
        result = await self._s.execute(
            select(UrgentRequestModel)
            .where(UrgentRequestModel.id == request_id)
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _request_to_domain(m) if m else None

    async def get_for_update(self, request_id: int) -> UrgentRequest | None:
        result = await self._s.execute(
            select(UrgentRequestModel)
            .where(UrgentRequestModel.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _request_to_domain(m) if m else None

    async def compare_and_set_status(
        self,
        request_id: int,
        expected: frozenset[RequestStatus],
        new_status: RequestStatus,
    ) -> bool:
        result = await self._s.execute(
            update(UrgentRequestModel)
            .where(
                UrgentRequestModel.id == request_id,
                UrgentRequestModel.status.in_([s.value for s in expected]),
            )
            .values(status=new_status.value, version=UrgentRequestModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return result.rowcount == 1

    async def list_active_since(self, since: datetime) -> list[UrgentRequest]:
        result = await self._s.execute(
            select(UrgentRequestModel)
            .where(
                UrgentRequestModel.status.in_(_ACTIVE_REQUEST_STATUSES),
                UrgentRequestModel.created_at >= since,
            )
            .order_by(UrgentRequestModel.created_at.desc())
        )
        return [_request_to_domain(m) for m in result.scalars()]


class SqlCandidateRepository(CandidateRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def add(self, candidate: ProfessionalCandidate) -> ProfessionalCandidate:
        m = UrgentCandidateModel(
            request_id=candidate.request_id,
            professional_id=candidate.professional_id,
            distance_km=candidate.distance_km,
            estimated_arrival_minutes=candidate.estimated_arrival_minutes,
            status=candidate.status.value,
            proposed_price=candidate.proposed_price,
            notes=candidate.notes,
            proposed_at=candidate.proposed_at or datetime.now(timezone.utc),
        )
        self._s.add(m)
        await self._s.flush()
        candidate.id = m.id
        candidate.proposed_at = m.proposed_at
        return candidate

    async def get(self, request_id: int, professional_id: int) -> ProfessionalCandidate | None:
        result = await self._s.execute(
            select(UrgentCandidateModel)
            .where(
                UrgentCandidateModel.request_id == request_id,
                UrgentCandidateModel.professional_id == professional_id,
            )
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _candidate_to_domain(m) if m else None

    async def list_by_request(self, request_id: int) -> list[ProfessionalCandidate]:
        result = await self._s.execute(
            select(UrgentCandidateModel)
            .where(UrgentCandidateModel.request_id == request_id)
            .order_by(UrgentCandidateModel.id)
            .execution_options(populate_existing=True)
        )
        return [_candidate_to_domain(m) for m in result.scalars()]

    async def request_ids_for_professional(self, professional_id: int) -> set[int]:
        result = await self._s.execute(
            select(UrgentCandidateModel.request_id).where(
                UrgentCandidateModel.professional_id == professional_id
            )
        )
        return set(result.scalars())

    async def resolve(
        self,
        candidate_id: int,
        new_status: CandidateStatus,
        responded_at: datetime,
        proposed_price: float | None = None,
        notes: str | None = None,
    ) -> bool:
        values: dict = {"status": new_status.value, "responded_at": responded_at}
        if proposed_price is not None:
            values["proposed_price"] = proposed_price
        if notes is not None:
            values["notes"] = notes
        result = await self._s.execute(
            update(UrgentCandidateModel)
            .where(
                UrgentCandidateModel.id == candidate_id,
                UrgentCandidateModel.status == CandidateStatus.AVAILABLE.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return result.rowcount == 1

    async def supersede_available(
        self,
        request_id: int,
        responded_at: datetime,
        except_candidate_id: int | None = None,
    ) -> list[ProfessionalCandidate]:
        conditions = [
            UrgentCandidateModel.request_id == request_id,
            UrgentCandidateModel.status == CandidateStatus.AVAILABLE.value,
        ]
        if except_candidate_id is not None:
            conditions.append(UrgentCandidateModel.id != except_candidate_id)

        result = await self._s.execute(
            update(UrgentCandidateModel)
            .where(*conditions)
            .values(status=CandidateStatus.SUPERSEDED.value, responded_at=responded_at)
            .returning(UrgentCandidateModel.id)
            .execution_options(synchronize_session=False)
        )
        ids = list(result.scalars())
        await self._s.flush()
        if not ids:
            return []

        rows = await self._s.execute(
            select(UrgentCandidateModel)
            .where(UrgentCandidateModel.id.in_(ids))
            .order_by(UrgentCandidateModel.id)
            .execution_options(populate_existing=True)
        )
        return [_candidate_to_domain(m) for m in rows.scalars()]

    async def list_stale(self, proposed_before: datetime) -> list[ProfessionalCandidate]:
        result = await self._s.execute(
            select(UrgentCandidateModel)
            .join(UrgentRequestModel, UrgentRequestModel.id == UrgentCandidateModel.request_id)
            .where(
                UrgentCandidateModel.status == CandidateStatus.AVAILABLE.value,
                UrgentCandidateModel.proposed_at < proposed_before,
                UrgentRequestModel.status == RequestStatus.PENDING.value,
            )
            .order_by(UrgentCandidateModel.proposed_at)
        )
        return [_candidate_to_domain(m) for m in result.scalars()]


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, assignment: Assignment) -> Assignment:
        m = UrgentAssignmentModel(
            request_id=assignment.request_id,
            professional_id=assignment.professional_id,
            status=assignment.status.value,
            agreed_price=assignment.agreed_price,
            notes=assignment.notes,
            assigned_at=assignment.assigned_at,
        )
        self._s.add(m)
        await self._s.flush()
        assignment.id = m.id
        return assignment

    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        result = await self._s.execute(
            select(UrgentAssignmentModel)
            .where(UrgentAssignmentModel.id == assignment_id)
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def get_by_request(self, request_id: int) -> Assignment | None:
        result = await self._s.execute(
            select(UrgentAssignmentModel).where(UrgentAssignmentModel.request_id == request_id)
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def mark_completed(
        self, assignment_id: int, completed_at: datetime, completion_minutes: int
    ) -> bool:
        result = await self._s.execute(
            update(UrgentAssignmentModel)
            .where(
                UrgentAssignmentModel.id == assignment_id,
                UrgentAssignmentModel.status == AssignmentStatus.ACTIVE.value,
            )
            .values(
                status=AssignmentStatus.COMPLETED.value,
                completed_at=completed_at,
                completion_minutes=completion_minutes,
            )
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return result.rowcount == 1

    async def set_escrow(self, assignment_id: int, escrow_id: str) -> None:
        await self._s.execute(
            update(UrgentAssignmentModel)
            .where(UrgentAssignmentModel.id == assignment_id)
            .values(escrow_id=escrow_id)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()

    async def mark_escrow_released(self, assignment_id: int, released_at: datetime) -> None:
        await self._s.execute(
            update(UrgentAssignmentModel)
            .where(UrgentAssignmentModel.id == assignment_id)
            .values(escrow_released_at=released_at)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()

    async def list_awaiting_escrow(self) -> list[Assignment]:
        result = await self._s.execute(
            select(UrgentAssignmentModel)
            .join(UrgentRequestModel, UrgentRequestModel.id == UrgentAssignmentModel.request_id)
            .where(
                UrgentAssignmentModel.status == AssignmentStatus.ACTIVE.value,
                UrgentAssignmentModel.agreed_price.is_not(None),
                UrgentAssignmentModel.escrow_id.is_(None),
                UrgentRequestModel.status == RequestStatus.ASSIGNED.value,
            )
            .order_by(UrgentAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def list_awaiting_release(self) -> list[Assignment]:
        result = await self._s.execute(
            select(UrgentAssignmentModel)
            .where(
                UrgentAssignmentModel.status == AssignmentStatus.COMPLETED.value,
                UrgentAssignmentModel.escrow_id.is_not(None),
                UrgentAssignmentModel.escrow_released_at.is_(None),
            )
            .order_by(UrgentAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]


class SqlProfessionalDirectory(ProfessionalDirectory):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def list_available(self, area: BoundingBox) -> list[ProfessionalSnapshot]:
        result = await self._s.execute(
            select(ProfessionalProfileModel)
            .where(
                ProfessionalProfileModel.is_available.is_(True),
                ProfessionalProfileModel.is_blocked.is_(False),
                ProfessionalProfileModel.latitude.is_not(None),
                ProfessionalProfileModel.longitude.is_not(None),
                ProfessionalProfileModel.latitude.between(area.min_latitude, area.max_latitude),
                ProfessionalProfileModel.longitude.between(area.min_longitude, area.max_longitude),
            )
            .order_by(ProfessionalProfileModel.id)
        )
        return [_professional_to_domain(m) for m in result.scalars()]

    async def get_by_id(self, professional_id: int) -> ProfessionalSnapshot | None:
        m = await self._s.get(ProfessionalProfileModel, professional_id)
        if m is None or m.latitude is None or m.longitude is None:
            return None
        return _professional_to_domain(m)


class SqlAvailabilityAdapter(AvailabilityPort):
    """Slot lookups on their own short-lived sessions.

    The finder checks many professionals concurrently and an AsyncSession
    must not be shared between concurrent operations.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def has_open_slot(self, professional_id: int, start: datetime, end: datetime) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(AvailabilitySlotModel.id)).where(
                    and_(
                        AvailabilitySlotModel.professional_id == professional_id,
                        AvailabilitySlotModel.status == "available",
                        AvailabilitySlotModel.start_time >= start,
                        AvailabilitySlotModel.start_time <= end,
                    )
                )
            )
            return (result.scalar() or 0) > 0


class SqlPricingRuleRepository(PricingRuleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_active_rules(self) -> list[PricingRule]:
        result = await self._s.execute(
            select(UrgentPricingRuleModel)
            .where(UrgentPricingRuleModel.active.is_(True))
            .order_by(UrgentPricingRuleModel.id)
        )
        return [_rule_to_domain(m) for m in result.scalars()]
