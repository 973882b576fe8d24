"""Drink Review API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DrinkReviewError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and documents table initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Public assets served under /public so stored relative picture paths are
      directly addressable
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, maintenance, reviews, users
from app.config import get_settings
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await manager.create_all()
    Path(settings.assets_dir, settings.pictures_subdir).mkdir(
        parents=True, exist_ok=True,
    )
    logger.info("Drink Review API started")
    yield
    await manager.dispose()
    logger.info("Drink Review API shutting down")


app = FastAPI(
    title="Drink Review API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(reviews.router)
app.include_router(maintenance.router)

app.mount(
    "/public",
    StaticFiles(directory=settings.assets_dir, check_dir=False),
    name="public",
)
