"""FastAPI application entrypoint for coursedocs."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from coursedocs.api.middleware.logging import LoggingMiddleware
from coursedocs.api.routes import admin
from coursedocs.api.routes.content import courses_router, interview_router
from coursedocs.core.cache import MemoryCacheBackend, ReadCache, RedisCacheBackend
from coursedocs.core.config import settings
from coursedocs.core.database import database_manager
from coursedocs.core.exceptions import ApplicationError
from coursedocs.core.observability import configure_logging, setup_tracing
from coursedocs.media.client import MediaStoreClient
from coursedocs.services.container import build_mongo_services


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize shared resources on startup and tear them down on shutdown."""

    await database_manager.initialize()
    await database_manager.ensure_indexes()
    backend = RedisCacheBackend(database_manager.redis) if database_manager.redis else MemoryCacheBackend()
    cache = ReadCache(backend)
    media = MediaStoreClient.from_settings(settings)

    app.state.cache = cache
    app.state.media = media
    app.state.services = build_mongo_services(database_manager, settings, media, cache)

    try:
        yield
    finally:
        await database_manager.close()


def create_app() -> FastAPI:
    configure_logging()
    application = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    setup_tracing(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingMiddleware)

    application.include_router(courses_router, prefix="/api")
    application.include_router(interview_router, prefix="/api")
    application.include_router(admin.router, prefix="/api")
    application.mount("/metrics", make_asgi_app())

    @application.exception_handler(ApplicationError)
    async def handle_application_error(_: Request, exc: ApplicationError):
        """Return standardized responses for application layer exceptions."""

        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    return application


app = create_app()
