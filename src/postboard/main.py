"""
Application factory and server entrypoint.

    postboard-api                      # uvicorn on HOST:PORT
    uvicorn postboard.main:create_app --factory

The store handle is owned by the app: the lifespan builds a `Database` from the
settings (unless one was injected, as tests do), optionally creates the tables,
and disposes the pool on shutdown.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from postboard.api.v1 import api_router, health_router
from postboard.api.v1.error_handlers import UnhandledErrorMiddleware, register_exception_handlers
from postboard.config.settings import Settings, get_settings
from postboard.core.logging import RequestIDMiddleware, setup_logging
from postboard.core.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from postboard.database.session import Database
from postboard.utils.logging import get_project_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database | None = app.state.database

    owns_database = database is None
    if owns_database:
        database = Database.from_settings(settings)
        app.state.database = database

    try:
        if settings.AUTO_CREATE_SCHEMA:
            await database.create_schema()
        logger.info("app.startup", extra={"env": settings.ENV, "api_prefix": settings.API_PREFIX})
        yield
    finally:
        if owns_database:
            await database.dispose()
            app.state.database = None
        logger.info("app.shutdown")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: explicit settings (defaults to the cached environment settings)
        database: an already constructed store handle; the caller keeps ownership

    Returns:
        The configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="postboard",
        version=get_project_version(),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Last added runs first: request id / access log wraps everything else, and
    # unexpected errors become a 500 envelope before any of them sees the response
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_REQUEST_BODY_BYTES)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "postboard.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        # create_app installs the logging config
        log_config=None,
    )


if __name__ == "__main__":
    run()
