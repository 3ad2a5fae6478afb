"""SafePlace routing — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from safeplace.adapters.persistence.database import engine
from safeplace.config import settings
from safeplace.infrastructure.api.routes_health import router as health_router
from safeplace.infrastructure.api.routes_routing import router as routing_router

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
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="SafePlace — victim/professional routing",
        description="Situation classification, professional allocation, and case transfer",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the React frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(routing_router, prefix="/api")

    return app


app = create_app()
