"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.notifications.http_gateway import HttpNotificationGateway, LoggingNotificationGateway
from app.adapters.notifications.outbox import InMemoryNotificationOutbox, NotificationWorker
from app.adapters.persistence.database import async_session_factory, get_session
from app.adapters.persistence.repositories import (
    SqlAssignmentRepository,
    SqlAvailabilityAdapter,
    SqlCandidateRepository,
    SqlPricingRuleRepository,
    SqlProfessionalDirectory,
    SqlUrgentRequestRepository,
)
from app.adapters.settlement.http_settlement import HttpSettlementGateway, LocalSettlementGateway
from app.application.event_bus import EventBus
from app.application.results import OperationResult
from app.application.use_cases.cancel_request import CancelUrgentRequestUseCase
from app.application.use_cases.complete_assignment import CompleteAssignmentUseCase
from app.application.use_cases.create_request import CreateUrgentRequestUseCase
from app.application.use_cases.dispatch_request import (
    CandidateProposer,
    DispatchRequestUseCase,
    ReplenishCandidatesUseCase,
)
from app.application.use_cases.expire_offers import ExpireStaleOffersUseCase
from app.application.use_cases.find_nearby_requests import FindNearbyRequestsUseCase
from app.application.use_cases.find_professionals import ProfessionalFinder
from app.application.use_cases.geo_scan import GeoScanUseCase
from app.application.use_cases.notifications import NotificationDispatcher
from app.application.use_cases.pricing import SuggestPriceUseCase
from app.application.use_cases.respond_to_request import AcceptCandidateUseCase, RejectCandidateUseCase
from app.application.use_cases.settlement import SettlementReconciler, SettlementService
from app.config import settings
from app.domain.events import AssignmentCompleted, CandidateAccepted, CandidateRejected, RequestCreated

logger = logging.getLogger(__name__)


policy = settings.dispatch_policy()
pricing_defaults = settings.pricing_defaults()

# Singleton adapters (process-wide)
notification_outbox = InMemoryNotificationOutbox()

if settings.notification_service_url:
    _notification_gateway = HttpNotificationGateway()
    logger.info("Delivering notifications via %s", settings.notification_service_url)
else:
    _notification_gateway = LoggingNotificationGateway()

if settings.settlement_service_url:
    settlement_gateway = HttpSettlementGateway()
    logger.info("Using settlement service at %s", settings.settlement_service_url)
else:
    settlement_gateway = LocalSettlementGateway()

notification_worker = NotificationWorker(
    notification_outbox, _notification_gateway, concurrency=settings.notification_concurrency
)

_availability = SqlAvailabilityAdapter(async_session_factory)


# ─── Builders (one set of repositories per session) ─────────────────


def build_finder(session: AsyncSession) -> ProfessionalFinder:
    return ProfessionalFinder(
        directory=SqlProfessionalDirectory(session),
        availability=_availability,
        policy=policy,
    )


def build_proposer(session: AsyncSession) -> CandidateProposer:
    return CandidateProposer(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
        finder=build_finder(session),
        pricing=SuggestPriceUseCase(SqlPricingRuleRepository(session), pricing_defaults),
    )


def build_dispatch_uc(session: AsyncSession) -> DispatchRequestUseCase:
    return DispatchRequestUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
        proposer=build_proposer(session),
        policy=policy,
    )


def build_replenish_uc(session: AsyncSession) -> ReplenishCandidatesUseCase:
    return ReplenishCandidatesUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
        proposer=build_proposer(session),
        policy=policy,
    )


def build_expire_offers_uc(session: AsyncSession) -> ExpireStaleOffersUseCase:
    candidates = SqlCandidateRepository(session)
    return ExpireStaleOffersUseCase(
        candidate_repo=candidates,
        rejecter=RejectCandidateUseCase(candidates),
        policy=policy,
    )


def build_settlement(session: AsyncSession) -> SettlementService:
    return SettlementService(
        assignment_repo=SqlAssignmentRepository(session),
        request_repo=SqlUrgentRequestRepository(session),
        gateway=settlement_gateway,
        policy=policy,
        outbox=notification_outbox,
    )


def build_reconciler(session: AsyncSession) -> SettlementReconciler:
    return SettlementReconciler(SqlAssignmentRepository(session), build_settlement(session))


# ─── Event bus ──────────────────────────────────────────────────────


async def run_in_own_session(
    bus: EventBus,
    operation: Callable[[AsyncSession], Awaitable[OperationResult]],
) -> OperationResult:
    """Run *operation* in a fresh transaction, commit, then publish its events."""
    async with async_session_factory() as session:
        result = await operation(session)
        await session.commit()
    await bus.publish_all(result.events)
    return result


def build_event_bus() -> EventBus:
    bus = EventBus()
    NotificationDispatcher(notification_outbox).register(bus)

    async def dispatch_new_request(event: RequestCreated) -> None:
        await run_in_own_session(bus, lambda s: build_dispatch_uc(s).execute(event.request_id))

    async def replenish_after_rejection(event: CandidateRejected) -> None:
        await run_in_own_session(bus, lambda s: build_replenish_uc(s).execute(event.request_id))

    async def open_escrow(event: CandidateAccepted) -> None:
        async with async_session_factory() as session:
            await build_settlement(session).on_candidate_accepted(event)
            await session.commit()

    async def release_escrow(event: AssignmentCompleted) -> None:
        async with async_session_factory() as session:
            await build_settlement(session).on_assignment_completed(event)
            await session.commit()

    bus.subscribe(RequestCreated, dispatch_new_request)
    bus.subscribe(CandidateRejected, replenish_after_rejection)
    bus.subscribe(CandidateAccepted, open_escrow)
    bus.subscribe(AssignmentCompleted, release_escrow)
    return bus


event_bus = build_event_bus()


def get_event_bus() -> EventBus:
    return event_bus


# ─── Request-scoped use cases ───────────────────────────────────────


def get_create_request_uc(session: AsyncSession = Depends(get_session)) -> CreateUrgentRequestUseCase:
    return CreateUrgentRequestUseCase(SqlUrgentRequestRepository(session))


def get_dispatch_uc(session: AsyncSession = Depends(get_session)) -> DispatchRequestUseCase:
    return build_dispatch_uc(session)


def get_accept_uc(session: AsyncSession = Depends(get_session)) -> AcceptCandidateUseCase:
    return AcceptCandidateUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
    )


def get_reject_uc(session: AsyncSession = Depends(get_session)) -> RejectCandidateUseCase:
    return RejectCandidateUseCase(SqlCandidateRepository(session))


def get_cancel_uc(session: AsyncSession = Depends(get_session)) -> CancelUrgentRequestUseCase:
    return CancelUrgentRequestUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
    )


def get_complete_uc(session: AsyncSession = Depends(get_session)) -> CompleteAssignmentUseCase:
    return CompleteAssignmentUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
    )


def get_nearby_uc(session: AsyncSession = Depends(get_session)) -> FindNearbyRequestsUseCase:
    return FindNearbyRequestsUseCase(
        request_repo=SqlUrgentRequestRepository(session),
        candidate_repo=SqlCandidateRepository(session),
        policy=policy,
    )


def get_geo_scan_uc(session: AsyncSession = Depends(get_session)) -> GeoScanUseCase:
    return GeoScanUseCase(SqlProfessionalDirectory(session))


def get_suggest_price_uc(session: AsyncSession = Depends(get_session)) -> SuggestPriceUseCase:
    return SuggestPriceUseCase(SqlPricingRuleRepository(session), pricing_defaults)


def get_professional_directory(session: AsyncSession = Depends(get_session)) -> SqlProfessionalDirectory:
    return SqlProfessionalDirectory(session)


def get_candidate_repo(session: AsyncSession = Depends(get_session)) -> SqlCandidateRepository:
    return SqlCandidateRepository(session)


def get_assignment_repo(session: AsyncSession = Depends(get_session)) -> SqlAssignmentRepository:
    return SqlAssignmentRepository(session)


def get_request_repo(session: AsyncSession = Depends(get_session)) -> SqlUrgentRequestRepository:
    return SqlUrgentRequestRepository(session)
