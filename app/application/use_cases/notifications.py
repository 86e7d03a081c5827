"""Turn committed domain events into outbound notifications.

Every message goes through the outbox, so a slow or failing delivery to one
recipient never blocks the caller or the other recipients.
"""

from __future__ import annotations

import logging

from app.application.event_bus import EventBus
from app.application.ports.notification_port import NotificationMessage, NotificationOutbox
from app.domain.events import (
    AssignmentCompleted,
    CandidateAccepted,
    CandidateProposed,
    CandidatesSuperseded,
    DomainEvent,
    RequestCancelled,
)
from app.domain.value_objects.enums import NotificationChannel, UrgencyLevel

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = (NotificationChannel.IN_APP, NotificationChannel.PUSH)


def channels_for(urgency: UrgencyLevel) -> tuple[NotificationChannel, ...]:
    if urgency == UrgencyLevel.HIGH:
        return DEFAULT_CHANNELS + (NotificationChannel.EMAIL,)
    return DEFAULT_CHANNELS


def proposal_messages(event: CandidateProposed) -> list[NotificationMessage]:
    return [
        NotificationMessage(
            recipient_id=event.professional_id,
            kind="urgent_request",
            title="Urgent request nearby",
            body=f"New urgent request {event.distance_km:.1f} km away: {event.description}",
            metadata={
                "request_id": event.request_id,
                "distance_km": event.distance_km,
                "estimated_arrival_minutes": event.estimated_arrival_minutes,
                "urgency_level": event.urgency_level.value,
                "suggested_price": event.suggested_price,
            },
            channels=channels_for(event.urgency_level),
        )
    ]


def accepted_messages(event: CandidateAccepted) -> list[NotificationMessage]:
    return [
        NotificationMessage(
            recipient_id=event.requester_id,
            kind="urgent_request_accepted",
            title="Urgent request accepted",
            body="A professional has accepted your urgent request",
            metadata={
                "request_id": event.request_id,
                "assignment_id": event.assignment_id,
                "professional_id": event.professional_id,
                "agreed_price": event.agreed_price,
            },
        )
    ]


def superseded_messages(event: CandidatesSuperseded) -> list[NotificationMessage]:
    # Cancellation already tells candidates through RequestCancelled
    if event.reason != "taken":
        return []
    return [
        NotificationMessage(
            recipient_id=professional_id,
            kind="urgent_request_taken",
            title="Urgent request taken",
            body="Another professional accepted this urgent request first",
            metadata={"request_id": event.request_id},
            channels=(NotificationChannel.IN_APP,),
        )
        for professional_id in event.professional_ids
    ]


def cancelled_messages(event: RequestCancelled) -> list[NotificationMessage]:
    return [
        NotificationMessage(
            recipient_id=professional_id,
            kind="urgent_request_cancelled",
            title="Urgent request cancelled",
            body="The client cancelled this urgent request",
            metadata={"request_id": event.request_id},
        )
        for professional_id in event.professional_ids
    ]


def completed_messages(event: AssignmentCompleted) -> list[NotificationMessage]:
    return [
        NotificationMessage(
            recipient_id=event.requester_id,
            kind="urgent_completed",
            title="Urgent request completed",
            body="Your urgent request has been completed",
            metadata={"request_id": event.request_id, "assignment_id": event.assignment_id},
        )
    ]


_BUILDERS = {
    CandidateProposed: proposal_messages,
    CandidateAccepted: accepted_messages,
    CandidatesSuperseded: superseded_messages,
    RequestCancelled: cancelled_messages,
    AssignmentCompleted: completed_messages,
}


class NotificationDispatcher:
    def __init__(self, outbox: NotificationOutbox):
        self._outbox = outbox

    async def handle(self, event: DomainEvent) -> None:
        builder = _BUILDERS.get(type(event))
        if builder is None:
            return
        messages = builder(event)
        for message in messages:
            await self._outbox.enqueue(message)
        logger.debug("Queued %d notifications for %s", len(messages), type(event).__name__)

    def register(self, bus: EventBus) -> None:
        for event_type in _BUILDERS:
            bus.subscribe(event_type, self.handle)


def funds_released_message(professional_id: int, request_id: int, amount: float | None) -> NotificationMessage:
    body = "Funds for your completed urgent service have been released"
    if amount is not None:
        body = f"{body}: {amount:.2f}"
    return NotificationMessage(
        recipient_id=professional_id,
        kind="funds_released",
        title="Funds released",
        body=body,
        metadata={"request_id": request_id, "amount": amount},
    )
