"""
account_opening.api.app

FastAPI app factory for the Account Opening service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from account_opening import __version__
from account_opening.api.errors import register_error_handlers
from account_opening.api.routers.advisor import router as advisor_router
from account_opening.api.routers.auth import router as auth_router
from account_opening.api.routers.director import router as director_router
from account_opening.api.routers.health import router as health_router
from account_opening.db.init_db import init_db, seed_roles
from account_opening.db.session import create_engine, create_sessionmaker
from account_opening.observability.logging import configure_logging, get_logger
from account_opening.observability.middleware import RequestContextMiddleware
from account_opening.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience; prod runs Alembic migrations and seeds the catalog there.
            await init_db(engine)
        await seed_roles(app.state.sessionmaker)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Account Opening Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(advisor_router)
    app.include_router(director_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Only immutable configuration and the engine live on app.state; everything
# request-scoped is created per call through dependencies.
