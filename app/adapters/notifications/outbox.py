"""In-process notification outbox and its delivery worker."""

from __future__ import annotations

import asyncio
import logging

from app.application.ports.notification_port import (
    NotificationGateway,
    NotificationMessage,
    NotificationOutbox,
)

logger = logging.getLogger(__name__)


class InMemoryNotificationOutbox(NotificationOutbox):
    def __init__(self) -> None:
        self._queue: asyncio.Queue[NotificationMessage] = asyncio.Queue()

    async def enqueue(self, message: NotificationMessage) -> None:
        self._queue.put_nowait(message)

    async def get(self) -> NotificationMessage:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def pending(self) -> int:
        return self._queue.qsize()


class NotificationWorker:
    """Drain the outbox, one delivery task per message.

    At most ``concurrency`` deliveries are in flight; a failed delivery is
    logged and dropped without affecting the others.
    """

    def __init__(
        self,
        outbox: InMemoryNotificationOutbox,
        gateway: NotificationGateway,
        concurrency: int = 20,
    ):
        self._outbox = outbox
        self._gateway = gateway
        self._semaphore = asyncio.Semaphore(concurrency)
        self._runner: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    def start(self) -> None:
        if self._runner is None:
            self._runner = asyncio.create_task(self._run(), name="notification-worker")

    async def stop(self) -> None:
        if self._runner is None:
            return
        self._runner.cancel()
        try:
            await self._runner
        except asyncio.CancelledError:
            pass
        self._runner = None
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            message = await self._outbox.get()
            await self._semaphore.acquire()
            task = asyncio.create_task(self._deliver(message))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def _deliver(self, message: NotificationMessage) -> None:
        try:
            await self._gateway.send(message)
        except Exception:
            logger.exception(
                "Notification %s to %s failed", message.kind, message.recipient_id
            )
        finally:
            self._semaphore.release()
            self._outbox.task_done()
