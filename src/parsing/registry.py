"""
Decoder Registry

This module centralizes the mapping between format classes and the coroutine
that turns a document of that class into plain text.  The extraction pipeline
looks the classified format up here and awaits exactly one decoder.

Key Responsibilities:
- Map every supported :class:`~src.extraction.types.FormatClass` to a decoder.
- Leave ``UNSUPPORTED`` unmapped; the pipeline rejects it before any read.

Dependencies:
- Individual parser modules (`.docx`, `.html`, `.pdf`, `.txt`).
- `src.extraction.types`: Format enum and the document handle protocol.

"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Final

from src.extraction.types import DocumentHandle, FormatClass

from .docx import extract_text_from_docx
from .html import extract_text_from_html
from .pdf import extract_text_from_pdf
from .txt import read_txt

__all__: list[str] = ["DECODERS"]

# Dispatch table – maps format classes to async text extraction functions.
DECODERS: Final[Dict[FormatClass, Callable[[DocumentHandle], Awaitable[str]]]] = {
    FormatClass.PLAIN_TEXT: read_txt,
    FormatClass.RICH_TEXT: read_txt,
    FormatClass.CSV: read_txt,
    FormatClass.JSON: read_txt,
    FormatClass.MARKDOWN: read_txt,
    FormatClass.XML: read_txt,
    FormatClass.HTML: extract_text_from_html,
    FormatClass.PDF: extract_text_from_pdf,
    FormatClass.WORD_DOCUMENT: extract_text_from_docx,
}
