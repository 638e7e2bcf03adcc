"""Car Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CarRegistryError → structured JSON responses
    - Store, notifier and services built once in the lifespan and passed
      explicitly; nothing is looked up from module globals at request time

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Notifier chosen by configuration: webhook when a URL is set, log otherwise
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from car_registry.api.error_handlers import register_error_handlers
from car_registry.api.routes import cars_read, cars_write, health
from car_registry.config import Settings, get_settings
from car_registry.infrastructure.car_store import SqlCarStore
from car_registry.infrastructure.database import DatabaseSessionManager
from car_registry.infrastructure.notifier import LogNotifier, WebhookNotifier
from car_registry.infrastructure.observability import setup_logging
from car_registry.services.car_read_service import CarReadService
from car_registry.services.car_write_service import CarWriteService

logger = logging.getLogger(__name__)


def build_notifier(settings: Settings):
    """Webhook notifier when configured, log notifier otherwise."""
    if settings.notification_webhook_url:
        return WebhookNotifier(
            settings.notification_webhook_url,
            timeout_seconds=settings.notification_timeout_seconds,
        )
    return LogNotifier()


def wire_services(app: FastAPI, db_manager: DatabaseSessionManager, notifier) -> None:
    """Attach store-backed services to app.state."""
    store = SqlCarStore(db_manager)
    read_service = CarReadService(store)
    app.state.db_manager = db_manager
    app.state.notifier = notifier
    app.state.read_service = read_service
    app.state.write_service = CarWriteService(store, read_service, notifier)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        await db_manager.create_schema()
    wire_services(app, db_manager, build_notifier(settings))
    logger.info("Car Registry API started")
    yield
    await db_manager.dispose()
    logger.info("Car Registry API shutting down")


app = FastAPI(
    title="Car Registry API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "Location"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(cars_read.router)
app.include_router(cars_write.router)

register_error_handlers(app)
