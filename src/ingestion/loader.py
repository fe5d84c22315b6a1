from __future__ import annotations

import structlog

from src.core.exceptions import ReadError
from src.extraction.types import DocumentHandle

__all__: list[str] = ["load_as_bytes", "load_as_text"]

logger = structlog.get_logger(__name__)


async def load_as_bytes(file: DocumentHandle) -> bytes:
    """
    Read the whole payload of *file* as raw bytes.

    The handle is rewound first so repeated loads return the same bytes.

    Raises:
        ReadError: The handle is closed or the underlying read failed.
    """
    try:
        await file.seek(0)
        return await file.read()
    except (OSError, ValueError) as exc:
        # ValueError: I/O operation on closed file
        logger.warning("document_read_failed", filename=file.filename, error=str(exc))
        raise ReadError(f"Unable to read document: {exc}") from exc


async def load_as_text(file: DocumentHandle) -> str:
    """
    Read the whole payload of *file* and decode it as UTF-8.

    A leading byte-order mark is dropped.  Undecodable bytes are not replaced;
    they fail the read.

    Raises:
        ReadError: The payload could not be read or is not valid UTF-8.
    """
    data = await load_as_bytes(file)
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning(
            "document_not_utf8",
            filename=file.filename,
            position=exc.start,
        )
        raise ReadError(
            f"Document is not valid UTF-8 (byte offset {exc.start})"
        ) from exc
