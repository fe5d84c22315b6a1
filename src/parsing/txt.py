from __future__ import annotations

from src.extraction.types import DocumentHandle
from src.ingestion.loader import load_as_text

__all__: list[str] = ["read_txt"]


async def read_txt(file: DocumentHandle) -> str:
    """
    Read a text-based document fully and decode it as UTF-8.

    Used for every passthrough format (plain text, RTF, CSV, JSON, Markdown,
    XML): the content is returned exactly as decoded, with no cleanup.

    Args:
        file: The document handle.

    Returns:
        The decoded text content of the file.
    """
    return await load_as_text(file)
