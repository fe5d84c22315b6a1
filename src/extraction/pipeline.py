"""
Extraction Pipeline Dispatcher

This module is the single entry point for turning a user-supplied document
into plain text.  It classifies the document from its declared media type and
filename, then hands it to exactly one decoder from
:data:`src.parsing.registry.DECODERS`.

Key Responsibilities:
- Classify each document into one format class.
- Reject unsupported documents before any of their bytes are read.
- Invoke the matching decoder once; no retries, no fallback decoder.
- Propagate decoder failures unchanged to the caller.
- Measure and report processing time (``extract_document``).

Dependencies:
- `src.extraction.classifier`: Pure ``(content_type, filename)`` classifier.
- `src.parsing.registry`: Format class to decoder dispatch table.
- `src.core.config`: Pipeline version reported with each result.
- `structlog`: Structured logging of classification and outcome.

"""

from __future__ import annotations

import time
from typing import Optional

import structlog

from src.core.config import Settings, get_settings
from src.core.exceptions import UnsupportedFormatError
from src.extraction.classifier import classify
from src.extraction.types import DocumentHandle, ExtractionResult, FormatClass
from src.parsing.registry import DECODERS

__all__: list[str] = ["extract", "extract_document"]

logger = structlog.get_logger(__name__)


async def _extract_classified(file: DocumentHandle, format_class: FormatClass) -> str:
    decoder = DECODERS.get(format_class)
    if decoder is None:
        logger.warning(
            "extraction_unsupported_format",
            filename=file.filename,
            content_type=file.content_type,
        )
        raise UnsupportedFormatError(file.content_type or "")
    return await decoder(file)


async def extract(file: Optional[DocumentHandle]) -> Optional[str]:
    """
    Extract the plain text of *file*.

    Args:
        file: The document to extract, or ``None`` when nothing was selected.

    Returns:
        The extracted text (possibly empty), or ``None`` when *file* is
        ``None``.

    Raises:
        UnsupportedFormatError: Neither the media type nor the suffix maps to
            a decoder.  Raised before the payload is read.
        ReadError: The payload could not be read or is not valid UTF-8.
        DecodeError: The PDF or Word decoder rejected the payload.
    """
    if file is None:
        return None

    format_class = classify(file.content_type, file.filename)
    logger.debug(
        "extraction_classified",
        filename=file.filename,
        content_type=file.content_type,
        format=format_class.value,
    )
    return await _extract_classified(file, format_class)


async def extract_document(
    file: DocumentHandle, *, settings: Optional[Settings] = None
) -> ExtractionResult:
    """
    Extract *file* and wrap the text with the metadata gathered on the way.

    Args:
        file: The document to extract.
        settings: Optional Settings instance (uses global if not provided)

    Failures propagate exactly as from :func:`extract`.
    """
    start_time = time.perf_counter()
    settings = settings or get_settings()

    filename = file.filename or "<unknown>"
    mime_type = file.content_type or "application/octet-stream"

    format_class = classify(file.content_type, file.filename)
    text = await _extract_classified(file, format_class)

    size_bytes = file.size or 0  # UploadFile.size is None for some clients
    processing_ms = (time.perf_counter() - start_time) * 1000

    result = ExtractionResult(
        filename=filename,
        mime_type=mime_type,
        format=format_class,
        size_bytes=size_bytes,
        text=text,
        pipeline_version=settings.pipeline_version,
        processing_ms=round(processing_ms, 2),
    )

    logger.info(
        "extraction_complete",
        filename=result.filename,
        format=result.format.value,
        size_bytes=result.size_bytes,
        text_chars=len(result.text),
        processing_ms=result.processing_ms,
        pipeline_version=result.pipeline_version,
    )
    return result
