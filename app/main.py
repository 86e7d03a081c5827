"""Urgent Dispatch Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.persistence.database import engine
from app.config import settings
from app.infrastructure.api.dependencies import event_bus, notification_worker
from app.infrastructure.api.routes_geo import router as geo_router
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_urgent import assignments_router
from app.infrastructure.api.routes_urgent import router as urgent_router
from app.infrastructure.background import MaintenanceLoop

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)

    maintenance = MaintenanceLoop(event_bus, settings.offer_sweep_interval_seconds)
    notification_worker.start()
    maintenance.start()
    yield
    await maintenance.stop()
    await notification_worker.stop()
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Urgent Dispatch Engine",
        description="Nearby professional matching, first-to-accept assignment and re-dispatch",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the web frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(urgent_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(geo_router, prefix="/api")

    return app


app = create_app()
