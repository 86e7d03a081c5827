"""In-process event bus — routes committed domain events to their handlers."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable

from app.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Dispatch events to handlers subscribed by event type.

    Handlers run after the producing transaction committed, so a failing
    handler is logged and never undoes the state change that raised the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    async def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (request %s)",
                    getattr(handler, "__qualname__", repr(handler)),
                    type(event).__name__,
                    event.request_id,
                )

    async def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)
