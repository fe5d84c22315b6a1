from __future__ import annotations

import asyncio
from io import BytesIO

import structlog
from pdfminer.high_level import extract_text
from pdfminer.psparser import PSException

from src.core.exceptions import DecodeError
from src.extraction.types import DocumentHandle, FormatClass
from src.ingestion.loader import load_as_bytes

__all__: list[str] = ["decode_pdf", "extract_text_from_pdf", "PAGE_BREAK"]

logger = structlog.get_logger(__name__)

PDF_SIGNATURE: bytes = b"%PDF-"
# Writers may prepend junk; readers accept the header anywhere in the first 1 KiB.
_SIGNATURE_WINDOW: int = 1024

# pdfminer's text converter terminates every page with this marker.
PAGE_BREAK: str = "\f"


async def decode_pdf(content: bytes) -> str:
    """
    Extract the text of every page of a PDF, in page order.

    Page texts are joined with a form feed (``\\f``).  Text drawn inside form
    XObjects is included.  No layout, tables or images are reconstructed.

    Documents encrypted with an owner password only (empty user password)
    are read even when their permissions forbid copying text; pdfminer merely
    warns about those.

    Args:
        content: Raw PDF bytes.

    Returns:
        The extracted text; empty when the pages carry no text objects.

    Raises:
        DecodeError: Missing header, structural corruption, or an encryption
            that cannot be opened with the empty password.
    """
    if PDF_SIGNATURE not in content[:_SIGNATURE_WINDOW]:
        logger.warning("pdf_signature_missing", size_bytes=len(content))
        raise DecodeError("Missing %PDF- header signature", format=FormatClass.PDF)

    def _worker(pdf_content: bytes) -> str:
        try:
            text = extract_text(BytesIO(pdf_content))
        except PSException as e:
            # Covers PDFSyntaxError and PDFPasswordIncorrect.
            logger.warning(
                "pdf_decode_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DecodeError(
                f"{type(e).__name__}: {e}", format=FormatClass.PDF
            ) from e
        except Exception as e:  # noqa: BLE001 – pdfminer raises arbitrary errors on garbage
            logger.error("pdf_decode_unexpected_error", error=str(e), exc_info=True)
            raise DecodeError(
                f"Unreadable PDF structure: {e}", format=FormatClass.PDF
            ) from e

        # Separator between pages, not a terminator after the last one.
        return text[: -len(PAGE_BREAK)] if text.endswith(PAGE_BREAK) else text

    return await asyncio.to_thread(_worker, content)


async def extract_text_from_pdf(file: DocumentHandle) -> str:
    """Load *file* and run it through :func:`decode_pdf`."""
    content = await load_as_bytes(file)
    return await decode_pdf(content)
