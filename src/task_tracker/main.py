"""Entry point for the task tracker FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db.session import dispose_engine, init_db
from .errors import register_exception_handlers
from .schemas.system import RootResponse

logger = logging.getLogger(__name__)


def _normalise_prefix(raw_prefix: str) -> str:
    router_prefix = raw_prefix.strip()
    if router_prefix and not router_prefix.startswith("/"):
        router_prefix = f"/{router_prefix}"
    router_prefix = router_prefix.rstrip("/")
    if router_prefix == "/":
        router_prefix = ""
    return router_prefix


def create_app(settings: Settings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if settings.auto_create_tables:
            logger.info("Creating database tables")
            await init_db()
        try:
            yield
        finally:
            await dispose_engine()

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Track tasks, the users they are assigned to, and comments on them.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    application.state.settings = settings

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if router_prefix:
        application.include_router(api_router, prefix=router_prefix)
    else:
        application.include_router(api_router)

    application.include_router(health_router)

    register_exception_handlers(application)

    @application.get("/", response_model=RootResponse, summary="Service metadata")
    async def read_root() -> RootResponse:
        """Expose minimal service metadata for API clients."""

        return RootResponse(
            name=settings.project_name,
            environment=settings.environment,
            version=settings.version,
            api_prefix=router_prefix or "/",
        )

    return application


app = create_app()


def run() -> None:
    """Convenience entry point for the ``task-tracker`` console script."""

    settings: Settings = get_settings()
    uvicorn.run(
        "task_tracker.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
