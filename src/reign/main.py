"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from reign.config import get_settings
from reign.connections.router import router as connections_router
from reign.database import Database
from reign.health.router import router as health_router
from reign.locations.router import router as locations_router
from reign.middleware import setup_middleware
from reign.pings.router import router as pings_router
from reign.profiles.router import router as profiles_router
from reign.status.router import router as status_router
from reign.validations.router import router as validations_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the connection pool at startup and drain it at shutdown."""
    settings = get_settings()
    db = Database(settings.database_url, settings.db_pool_size, settings.db_max_overflow)
    app.state.db = db
    logger.info("database_pool_opened", pool_size=settings.db_pool_size)

    yield

    await db.close()
    app.state.db = None
    logger.info("database_pool_closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Reign API",
        description="Profiles, proximity search, pings, connections and peer validation",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(profiles_router)
    app.include_router(locations_router)
    app.include_router(status_router)
    app.include_router(pings_router)
    app.include_router(connections_router)
    app.include_router(validations_router)

    return app


app = create_app()
