"""
FastAPI application factory. No business logic; only wiring and middleware.

Run with: uvicorn prowler_dashboard.main:create_app --factory
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prowler_dashboard.api import router as api_router
from prowler_dashboard.core.config import Settings, get_settings
from prowler_dashboard.core.database import Database
from prowler_dashboard.core.errors import register_exception_handlers
from prowler_dashboard.core.logging import configure_logging
from prowler_dashboard.services.prowler_client import ProwlerClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Prowler Dashboard API starting (environment=%s)", app.state.settings.APP_ENV)
    try:
        yield
    finally:
        app.state.database.dispose()
        logger.info("Database connections closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its own Database (connection pool) and Prowler client.

    Without explicit settings they come from the environment; a missing
    DATABASE_URL or SESSION_SECRET fails here, at startup.
    """
    if settings is None:
        load_dotenv()
        settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Prowler Dashboard API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.prowler_client = ProwlerClient(timeout=settings.PROWLER_REQUEST_TIMEOUT_SEC)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app
