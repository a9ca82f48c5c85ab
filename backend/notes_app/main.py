"""
Notes App - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in notes_app/features/ has its own router, service, and schemas.
  The editing client (notes_app/client/) talks to these routes over HTTP.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notes_app.config import get_settings
from notes_app.core.logs import setup_logging
from notes_app.background.trash_purge import init_scheduler, shutdown_scheduler

# ── Feature Routers ──────────────────────────────────────
from notes_app.features.auth.router import router as auth_router
from notes_app.features.notes.router import router as notes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    init_scheduler()
    yield
    shutdown_scheduler()
    logger.info("👋 Shutting down...")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    setup_logging("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.APP_VERSION,
        description="Personal notes: user accounts, notes and trash",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register Feature Routers ─────────────────────────
    app.include_router(auth_router, prefix="/api/users", tags=["Users"])
    app.include_router(notes_router, prefix="/api", tags=["Notes"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
