"""Text extraction service ─ FastAPI application
==============================================

This module hosts the **production ASGI application**.  ``__init__.py`` stays
minimal and only re-exports ``app``.

Usage
-----
Run locally with::

    uvicorn src.api.app:app --reload

The FastAPI instance is exposed as ``app``.
"""

from __future__ import annotations

# third-party
import structlog
from fastapi import APIRouter, FastAPI

# local imports
from src.api.errors import add_exception_handlers
from src.api.routes import admin as admin_router_module
from src.api.routes import extract as extract_router_module
from src.core.config import get_settings
from src.core.logging import RequestLoggingMiddleware, configure_logging

__all__: list[str] = ["app", "create_app"]

# ---------------------------------------------------------------------------
# Initialise *process-wide* logging before any logger instantiation.
# ---------------------------------------------------------------------------
settings = get_settings()
configure_logging(settings.debug)
logger = structlog.get_logger(__name__)


def _register_routes(app_instance: FastAPI) -> None:
    """Include every router from :py:mod:`src.api.routes`."""
    routers: list[APIRouter] = [
        extract_router_module.router,
        admin_router_module.router,
    ]
    for router in routers:
        app_instance.include_router(router)


def create_app() -> FastAPI:  # noqa: D401 – factory
    """Build and configure the FastAPI application."""

    app_instance = FastAPI(
        title="Document Text Extractor",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    # ------------------------------------------------------------------
    # Middleware – logging comes first so later handlers inherit context vars.
    # ------------------------------------------------------------------
    app_instance.add_middleware(RequestLoggingMiddleware)

    # ------------------------------------------------------------------
    # Lifespan events
    # ------------------------------------------------------------------
    @app_instance.on_event("startup")
    async def _on_startup() -> None:  # pragma: no cover – trivial logging
        logger.info(
            "fastapi_startup",
            commit_sha=settings.commit_sha,
            pipeline_version=settings.pipeline_version,
        )

    @app_instance.on_event("shutdown")
    async def _on_shutdown() -> None:  # pragma: no cover – trivial logging
        logger.info("fastapi_shutdown")

    @app_instance.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:  # noqa: D401
        return {"message": "Document Text Extractor – FastAPI layer"}

    _register_routes(app_instance)
    # HTTP 4xx/5xx and extraction failures → JSON envelope
    add_exception_handlers(app_instance)

    return app_instance


# Instantiate once at import time.
app: FastAPI = create_app()
