"""Operational endpoints: liveness and build/version metadata."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from src.api.schemas import HealthSchema, VersionSchema
from src.core.config import Settings, get_settings
from src.parsing.registry import DECODERS

__all__: list[str] = [
    "router",
]

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Admin"])

SETTINGS_DEP: Settings = Depends(get_settings)


@router.get("/health", response_model=HealthSchema)
async def health(settings: Settings = SETTINGS_DEP) -> HealthSchema:
    return HealthSchema(status="ok", commit_sha=settings.commit_sha or "unknown")


@router.get("/version", response_model=VersionSchema, summary="Build metadata")
async def version(
    request: Request,
    settings: Settings = SETTINGS_DEP,
) -> VersionSchema:
    """Report what this deployment extracts and which build it is.

    ``pipeline_version`` matches the value stamped on every extraction result;
    ``supported_formats`` lists the format classes that have a decoder.
    """

    return VersionSchema(
        version=request.app.version,
        pipeline_version=settings.pipeline_version,
        commit_sha=settings.commit_sha,
        supported_formats=sorted(format_class.value for format_class in DECODERS),
    )
