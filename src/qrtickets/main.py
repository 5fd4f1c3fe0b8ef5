"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse

from qrtickets import __version__
from qrtickets.api.middleware import setup_exception_handlers, setup_middleware
from qrtickets.core.config import Settings
from qrtickets.core.database import close_pool, init_pool
from qrtickets.core.logging import setup_logging

logger = logging.getLogger(__name__)

CATCH_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(settings: Settings | None = None, pool: Any | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When *pool* is given the app uses it as-is and leaves closing it to the
    caller; otherwise the lifespan opens ``settings.database_path``.
    """
    if settings is None:
        settings = Settings()

    if not settings.is_testing:
        setup_logging(level=settings.log_level, log_format=settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting QR tickets API (env=%s)", settings.app_env)
        owns_pool = pool is None
        app.state.db_pool = init_pool(settings) if owns_pool else pool
        yield
        logger.info("Shutting down QR tickets API")
        if owns_pool:
            close_pool(app.state.db_pool)
        app.state.db_pool = None

    application = FastAPI(
        title="QR Tickets API",
        description="Issue, validate and redeem event tickets with QR codes",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.db_pool = pool

    setup_middleware(application)
    setup_exception_handlers(application)
    _register_routes(application, settings)
    _mount_client(application, Path(settings.client_build_dir))

    return application


def _register_routes(app: FastAPI, settings: Settings) -> None:
    from qrtickets.api.routes.health import router as health_router
    from qrtickets.api.routes.tickets import router as tickets_router

    app.include_router(health_router, tags=["health"])
    app.include_router(tickets_router, prefix=settings.normalized_api_prefix)


def _mount_client(app: FastAPI, build_dir: Path) -> None:
    """Serve the prebuilt client for every GET path the API does not claim.

    Other methods on unclaimed paths get a 404, as they would with no bundle.
    """
    index = build_dir / "index.html"
    if not index.is_file():
        logger.debug("No client bundle at %s; static fallback disabled", build_dir)
        return
    root = build_dir.resolve()

    @app.api_route("/{full_path:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
    def client_bundle(full_path: str, request: Request) -> FileResponse:
        if request.method not in ("GET", "HEAD"):
            raise HTTPException(status_code=404, detail="Not found")
        candidate = (root / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        if not index.is_file():
            raise HTTPException(status_code=404, detail="Not found")
        return FileResponse(index)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "qrtickets.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_config=None,
    )


# Module-level app instance for uvicorn (uvicorn qrtickets.main:app)
app = create_app()
