"""FastAPI application entry point for the Blob Retention service.

This module wires settings, logging, the blob store adapter and the
retention job into the application and exposes the scheduler endpoint.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blob_retention.api.routes import cleanup, health
from blob_retention.config import Settings, get_settings
from blob_retention.observability.logging import get_logger, setup_logging
from blob_retention.observability.metrics import METRICS_CONTENT_TYPE, get_metrics_manager
from blob_retention.retention.job import RetentionJob
from blob_retention.storage.base import ObjectStore
from blob_retention.storage.vercel_blob import VercelBlobStore

logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": ...}`` bodies."""
    detail: dict[str, Any] | str = exc.detail
    content = detail if isinstance(detail, dict) else {"error": detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=dict(exc.headers or {}),
    )


def create_app(
    settings: Settings | None = None,
    store: ObjectStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to environment settings)
        store: Object store (defaults to the hosted blob store adapter)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(
            json_format=settings.observability.log_format == "json",
            log_level=settings.observability.log_level,
        )

        owned_store: VercelBlobStore | None = None
        active_store = store
        if active_store is None:
            owned_store = VercelBlobStore(settings.blob_store)
            active_store = owned_store

        app.state.retention_job = RetentionJob.from_settings(active_store, settings.retention)

        logger.info(
            "starting_application",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.env,
            base_prefix=settings.retention.base_prefix,
        )

        yield

        logger.info("shutting_down_application")
        if owned_store is not None:
            await owned_store.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Scheduled retention and garbage collection for blob storage",
        docs_url="/docs" if settings.env != "production" else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(health.router)
    app.include_router(cleanup.router)

    if settings.observability.metrics_enabled:
        @app.get("/metrics", include_in_schema=False)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=get_metrics_manager().get_metrics(),
                media_type=METRICS_CONTENT_TYPE,
            )

    return app


def cli() -> None:
    """Command-line entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "blob_retention.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    cli()
