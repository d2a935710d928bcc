"""Entry point for the task tracker FastAPI application."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from .api.routers import api_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .core.security import CredentialService
from .db import DocumentStore
from .deps import SettingsDependency
from .errors import register_exception_handlers
from .schemas.system import RootResponse


def _normalise_prefix(raw_prefix: str) -> str:
    prefix = raw_prefix.strip()
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return "" if prefix == "/" else prefix


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    store: DocumentStore = application.state.document_store
    await store.connect()
    try:
        yield
    finally:
        await store.close()


def create_app(
    settings: Settings | None = None,
    *,
    mongo_client: AsyncIOMotorClient | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    Process-wide collaborators (settings, credential service, document store)
    are built here and hung off ``app.state``; handlers reach them through
    dependencies.
    """

    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Personal task tracking API.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
        lifespan=_lifespan,
    )

    application.state.settings = settings
    application.state.started_at = time.monotonic()
    application.state.credentials = CredentialService.from_settings(settings)
    application.state.document_store = DocumentStore.from_settings(settings, client=mongo_client)

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    application.include_router(api_router, prefix=router_prefix)

    @application.get("/", response_model=RootResponse, summary="Service metadata")
    async def read_root(app_settings: SettingsDependency) -> RootResponse:
        """Expose minimal service metadata at the root endpoint."""
        return RootResponse(
            name=app_settings.project_name,
            environment=app_settings.environment,
            version=app_settings.version,
            api_prefix=app_settings.api_prefix,
        )

    register_exception_handlers(application)

    return application


def run() -> None:
    """Console entry point: ``tasktracker``."""

    settings = get_settings()
    uvicorn.run(
        "tasktracker.app.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )


__all__ = ["create_app", "run"]
