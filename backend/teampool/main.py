"""TeamPool API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TeamPoolError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teampool.api.error_handlers import register_error_handlers
from teampool.api.routes import contributions, expenses, health, invitations, teams
from teampool.config import get_settings
from teampool.infrastructure import database
from teampool.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("TeamPool API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("TeamPool API shutting down")


app = FastAPI(
    title="TeamPool API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(teams.router)
app.include_router(invitations.router)
app.include_router(contributions.router)
app.include_router(expenses.router)

register_error_handlers(app)
