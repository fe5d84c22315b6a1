"""src/parsing/__init__.py
###############################################################################
Parsing Package Root
###############################################################################
Central interface for *format specific* text-extraction helpers.

Public helpers
--------------
The package exposes **asynchronous** helpers that turn a document handle (or
its raw bytes) into a plaintext string.  Each helper MUST:

1. Never block the event-loop – CPU-bound work is off-loaded via
   `asyncio.to_thread()` so the FastAPI worker remains responsive.
2. Fail loudly – a rejected payload raises
   :class:`~src.core.exceptions.DecodeError` (or ``ReadError`` from the
   loader); helpers never return an error message as text.
3. Return *raw* text; no cleaning, normalisation or truncation.

The dispatch table (`DECODERS`) lives in :py:mod:`src.parsing.registry`.
"""

from __future__ import annotations

from .docx import decode_docx, extract_text_from_docx
from .html import extract_text_from_html, strip_markup
from .pdf import decode_pdf, extract_text_from_pdf
from .txt import read_txt

__all__: list[str] = [
    "decode_docx",
    "decode_pdf",
    "extract_text_from_docx",
    "extract_text_from_html",
    "extract_text_from_pdf",
    "read_txt",
    "strip_markup",
]
