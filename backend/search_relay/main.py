"""Person Search Relay: FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RelayError → {"ok": false, "error": CODE}
    - Settings built once and stored on app.state, never re-read per request
    - Certificate material loaded on startup; unreadable material aborts startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Factory over a module-level app: the person search path is configurable and
      tests build apps from explicit Settings (uvicorn runs it with factory=True)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from search_relay.api.error_handlers import register_error_handlers
from search_relay.api.routes import health, person_search
from search_relay.config import Settings, get_settings
from search_relay.infrastructure.observability import setup_logging
from search_relay.infrastructure.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(
        settings.log_level, settings.log_format,
        redact=settings.redacted_values(),
    )
    app.state.upstream_client = UpstreamClient.from_settings(settings)
    logger.info("Person search relay started", extra={"port": settings.port})
    yield
    await app.state.upstream_client.aclose()
    logger.info("Person search relay shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the relay application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Person Search Relay", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(
        person_search.router, prefix=settings.person_search_path,
    )

    register_error_handlers(app)
    return app
