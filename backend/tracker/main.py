"""Drink Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly: one router per resource kind plus health
    - Global error handlers map every failure to {"message": str} (api/error_handlers.py)
    - RequestCorrelationMiddleware wraps every route
    - The store is opened on startup via lifespan and shared through app.state

Design Decisions:
    - create_app() factory: tests inject a temporary StoreConnection instead of
      patching a module-level singleton
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schemas are defined lazily on first create, not at startup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tracker.api.error_handlers import register_error_handlers
from tracker.api.middleware import RequestCorrelationMiddleware
from tracker.api.routes import health
from tracker.api.routes.resources import build_resource_router
from tracker.config import Settings, get_settings
from tracker.infrastructure.observability import setup_logging
from tracker.infrastructure.store import StoreConnection, open_store
from tracker.resources import RESOURCE_KINDS

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    connection: StoreConnection | None = None,
) -> FastAPI:
    """Build the app. An injected connection is used as-is and never closed here."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        owns_store = connection is None
        if owns_store:
            app.state.store = open_store(settings.store_path)
        logger.info("Drink tracker API started")
        yield
        logger.info("Drink tracker API shutting down")
        if owns_store:
            await app.state.store.close()

    app = FastAPI(
        title="Drink Tracker API", version=health.SERVICE_VERSION,
        lifespan=lifespan,
    )
    if connection is not None:
        app.state.store = connection

    register_error_handlers(app)

    for kind in RESOURCE_KINDS:
        app.include_router(build_resource_router(kind))
    app.include_router(health.router)

    app.add_middleware(
        RequestCorrelationMiddleware, header_name=settings.request_id_header,
    )
    return app


app = create_app()
