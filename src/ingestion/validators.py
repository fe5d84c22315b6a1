from __future__ import annotations

from typing import Optional

import structlog
from fastapi import HTTPException, UploadFile, status

from src.core.config import Settings, get_settings

__all__: list[str] = ["validate_file"]

logger = structlog.get_logger(__name__)


def _validate_filename(filename: Optional[str]) -> str:
    """Ensure filename exists and is not empty."""
    if not filename:
        logger.warning("file_upload_no_filename")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No filename provided."
        )
    return filename


def _validate_size(file: UploadFile, filename: str, settings: Settings) -> int:
    """Validate the file size; zero-length uploads are accepted."""
    try:
        current_pos = file.file.tell()
        file.file.seek(0, 2)
        size = file.file.tell()
        file.file.seek(current_pos)  # Reset position
    except (OSError, ValueError) as e:
        logger.error("file_size_check_failed", error=str(e), filename=filename)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to assess uploaded file size. The upload may be corrupted.",
        ) from e

    if size > settings.max_file_size_bytes:
        logger.warning(
            "file_upload_too_large",
            size=size,
            max_size=settings.max_file_size_bytes,
            filename=filename,
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=(
                f"File size {size / 1024 / 1024:.2f} MB exceeds the "
                f"limit of {settings.max_file_size_mb} MB."
            ),
        )
    return size


def validate_file(file: UploadFile, *, settings: Optional[Settings] = None) -> int:
    """
    Validate an uploaded file against configured restrictions.

    Only the envelope is checked here; whether the format is supported is
    decided by the classifier, and whether the payload decodes by the
    decoders.

    Args:
        file: The uploaded file to validate
        settings: Optional Settings instance (uses global if not provided)

    Returns:
        The upload size in bytes.

    Raises:
        HTTPException: With appropriate status code if validation fails
            - 400: Missing filename, size check error
            - 413: File too large
    """
    settings = settings or get_settings()

    filename = _validate_filename(file.filename)
    size = _validate_size(file, filename, settings)

    logger.debug(
        "upload_validation_passed",
        filename=filename,
        size_bytes=size,
        content_type=file.content_type,
    )
    return size
