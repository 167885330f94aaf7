"""Inkwell API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the {success: false, ...} envelope
    - CORS configured from settings (not hardcoded)
    - The database session manager is created on startup, stored on app.state,
      and disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell.api.error_handlers import register_error_handlers
from inkwell.api.routes import health, posts, users
from inkwell.config import get_settings
from inkwell.infrastructure.database import DatabaseSessionManager
from inkwell.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        timeout_seconds=settings.database_timeout_seconds,
    )
    if settings.database_auto_create:
        await db_manager.create_schema()
    app.state.db_manager = db_manager
    logger.info("Inkwell API started")
    yield
    logger.info("Inkwell API shutting down")
    await db_manager.close()
    app.state.db_manager = None


settings = get_settings()
app = FastAPI(
    title=settings.app_name, version=settings.app_version, lifespan=lifespan,
)

# CORS origins come from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

# Routes: health at the root, resources under api_prefix
app.include_router(health.router)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(posts.router, prefix=settings.api_prefix)

register_error_handlers(app)
