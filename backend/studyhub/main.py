"""StudyHub API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StudyHubError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database manager created once on startup and disposed on shutdown (lifespan)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studyhub.api.error_handlers import register_error_handlers
from studyhub.api.routes import auth, groups, health, matching, messages, profiles
from studyhub.config import get_settings
from studyhub.infrastructure.database import close_db, init_db
from studyhub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout_seconds,
        lock_timeout=settings.database_lock_timeout_seconds,
    )
    logger.info("StudyHub API started")
    yield
    await close_db()
    logger.info("StudyHub API shut down")


app = FastAPI(title="StudyHub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(groups.router)
app.include_router(messages.router)
app.include_router(matching.router)

register_error_handlers(app)
