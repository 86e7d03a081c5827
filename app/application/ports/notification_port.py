"""Port interfaces for notification delivery."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.domain.value_objects.enums import NotificationChannel


@dataclass(frozen=True)
class NotificationMessage:
    recipient_id: int
    kind: str
    title: str
    body: str
    metadata: dict = field(default_factory=dict)
    channels: tuple[NotificationChannel, ...] = (
        NotificationChannel.IN_APP,
        NotificationChannel.PUSH,
    )


class NotificationGateway(ABC):
    @abstractmethod
    async def send(self, message: NotificationMessage) -> None:
        """Deliver one message. Raises DownstreamUnavailableError on failure."""
        ...


class NotificationOutbox(ABC):
    @abstractmethod
    async def enqueue(self, message: NotificationMessage) -> None:
        """Queue a message for background delivery. Must not block on delivery."""
        ...
