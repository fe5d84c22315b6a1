from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from src.api.schemas import ExtractionResultSchema
from src.core.config import Settings, get_settings
from src.core.logging import REQUEST_ID_HEADER
from src.extraction.pipeline import extract_document
from src.ingestion.validators import validate_file

__all__: list[str] = [
    "router",
]

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["extract"])

FILE_PARAM: UploadFile = File(..., description="The document to extract text from")

SETTINGS_DEP: Settings = Depends(get_settings)


@router.post(
    "/extract",
    summary="Extract plain text from one uploaded document.",
    response_model=ExtractionResultSchema,
    status_code=status.HTTP_200_OK,
)
async def extract_uploaded_file(
    request: Request,
    file: UploadFile = FILE_PARAM,
    settings: Settings = SETTINGS_DEP,
) -> JSONResponse:
    """
    Validate the upload, then classify and decode it.

    Extraction failures are not caught here; the global handlers in
    :py:mod:`src.api.errors` turn them into 415 / 400 / 422 responses.
    """
    request_id: str = getattr(request.state, "request_id", None) or (
        request.headers.get(REQUEST_ID_HEADER) or ""
    )

    size_bytes = validate_file(file, settings=settings)

    internal_result = await extract_document(file, settings=settings)
    payload = internal_result.dict()
    # Prefer the measured size; UploadFile.size is not always populated.
    payload["size_bytes"] = size_bytes
    result = ExtractionResultSchema(**payload, request_id=request_id)

    logger.info(
        "upload_extracted",
        filename=result.filename,
        format=result.format.value,
        size_bytes=result.size_bytes,
    )

    response = JSONResponse(
        content=result.model_dump(mode="json"), status_code=status.HTTP_200_OK
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
