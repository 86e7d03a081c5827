"""Periodic maintenance: offer timeouts and settlement retries."""

from __future__ import annotations

import asyncio
import logging

from app.adapters.persistence.database import async_session_factory
from app.application.event_bus import EventBus
from app.infrastructure.api.dependencies import (
    build_expire_offers_uc,
    build_reconciler,
    run_in_own_session,
)

logger = logging.getLogger(__name__)


class MaintenanceLoop:
    def __init__(self, bus: EventBus, interval_seconds: float):
        self._bus = bus
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="maintenance-loop")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_once(self) -> None:
        await run_in_own_session(self._bus, lambda s: build_expire_offers_uc(s).execute())
        async with async_session_factory() as session:
            await build_reconciler(session).run_once()
            await session.commit()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.run_once()
            except Exception:
                logger.exception("Maintenance cycle failed")
