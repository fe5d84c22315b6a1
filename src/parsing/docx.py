"""src/parsing/docx.py
###############################################################################
Word (OOXML) text extraction using python-docx
###############################################################################
The payload is opened as an Office Open XML package straight from memory; the
main document part's block items are walked in document order and the run
text of every paragraph, including those inside table cells, is joined with
newlines.  Formatting, table structure, headers, footnotes and images are
ignored.

Legacy binary ``.doc`` files are OLE compound files, not zip packages, so they
are rejected with the same :class:`~src.core.exceptions.DecodeError` as any
other broken package.
"""

from __future__ import annotations

import asyncio
import zipfile
from io import BytesIO
from typing import Iterator, Set

import docx
import structlog
from docx.blkcntnr import BlockItemContainer
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.table import CT_Tc
from docx.table import Table

from src.core.exceptions import DecodeError
from src.extraction.types import DocumentHandle, FormatClass
from src.ingestion.loader import load_as_bytes

__all__: list[str] = ["decode_docx", "extract_text_from_docx"]

logger = structlog.get_logger(__name__)


def _iter_table_texts(table: Table) -> Iterator[str]:
    # Merged cells are returned once per grid column they span.
    seen: Set[CT_Tc] = set()
    for row in table.rows:
        for cell in row.cells:
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from _iter_block_texts(cell)


def _iter_block_texts(container: BlockItemContainer) -> Iterator[str]:
    """Yield paragraph texts of *container* in document order, tables included."""
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            yield from _iter_table_texts(block)
        else:
            yield block.text


async def decode_docx(content: bytes) -> str:
    """
    Extract paragraph text from a Word document package.

    Args:
        content: Raw ``.docx`` bytes.

    Returns:
        Paragraph texts joined with ``"\\n"``.

    Raises:
        DecodeError: Not a zip package, missing main document part, or the
            package is not a Word document.
    """

    def _worker(docx_content: bytes) -> str:
        try:
            document = docx.Document(BytesIO(docx_content))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
            # ValueError: package content type is not a Word main document
            logger.warning(
                "docx_decode_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DecodeError(
                f"{type(e).__name__}: {e}", format=FormatClass.WORD_DOCUMENT
            ) from e
        except Exception as e:  # noqa: BLE001 – lxml/zip errors on damaged parts
            logger.error("docx_decode_unexpected_error", error=str(e), exc_info=True)
            raise DecodeError(
                f"Unreadable Word package: {e}", format=FormatClass.WORD_DOCUMENT
            ) from e

        return "\n".join(_iter_block_texts(document))

    # Run CPU-bound extraction in threadpool
    return await asyncio.to_thread(_worker, content)


async def extract_text_from_docx(file: DocumentHandle) -> str:
    """Load *file* and run it through :func:`decode_docx`."""
    content = await load_as_bytes(file)
    return await decode_docx(content)
