"""src/api/schemas.py
###############################################################################
Public Pydantic models **exposed by the API layer**.
###############################################################################
The internal :class:`~src.extraction.types.ExtractionResult` is a plain
dataclass; this module defines the contract clients actually see, adding the
``request_id`` envelope field so the pipeline can evolve without breaking the
public response.
"""

from __future__ import annotations

# stdlib
import uuid
from typing import List, Optional

# third-party
from pydantic import BaseModel, ConfigDict, Field

# local
from src.extraction.types import FormatClass

__all__: list[str] = [
    "ExtractionResultSchema",
    "HealthSchema",
    "VersionSchema",
]


class ExtractionResultSchema(BaseModel):
    """Public response model for a single extraction."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Original filename of the upload.")
    mime_type: str = Field(..., description="Declared media type, as received.")
    format: FormatClass = Field(..., description="Format class chosen for decoding.")
    size_bytes: int = Field(..., ge=0, description="Upload size in bytes.")
    text: str = Field(..., description="Extracted plain text; may be empty.")
    pipeline_version: str = Field(..., description="Extraction pipeline version.")
    processing_ms: float = Field(..., ge=0, description="Extraction latency.")
    request_id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="Request-scoped id.  Filled by the route handler.",
    )


class HealthSchema(BaseModel):
    """Liveness probe body."""

    status: str = Field("ok", description="Always ``ok`` while the process serves.")
    commit_sha: str = Field(..., description="Deployed commit, or ``unknown``.")


class VersionSchema(BaseModel):
    version: str = Field(..., description="Application version.")
    pipeline_version: str = Field(..., description="Extraction pipeline version.")
    commit_sha: Optional[str] = Field(None, description="Deployed commit, if known.")
    supported_formats: List[str] = Field(
        ..., description="Format classes this deployment can decode."
    )
