"""
Format Classifier

Maps the two weak signals a document carries, its declared media type and its
filename suffix, onto exactly one :class:`~src.extraction.types.FormatClass`.

Rules, in order:

1. The declared media type (parameters dropped, lower-cased) is looked up in
   :data:`MEDIA_TYPE_TABLE`.  A declared type always wins over the suffix.
2. Otherwise the lower-cased filename suffix is looked up in
   :data:`SUFFIX_TABLE`.
3. Otherwise the document is ``UNSUPPORTED``.

The function is pure: the same ``(content_type, filename)`` pair always yields
the same class and no document bytes are touched.
"""

from __future__ import annotations

import os
from typing import Dict, Final, Optional

from src.extraction.types import FormatClass

__all__: list[str] = ["MEDIA_TYPE_TABLE", "SUFFIX_TABLE", "classify"]

MEDIA_TYPE_TABLE: Final[Dict[str, FormatClass]] = {
    "text/plain": FormatClass.PLAIN_TEXT,
    "application/pdf": FormatClass.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
        FormatClass.WORD_DOCUMENT
    ),
    "application/msword": FormatClass.WORD_DOCUMENT,
    "application/rtf": FormatClass.RICH_TEXT,
    "text/html": FormatClass.HTML,
    "text/csv": FormatClass.CSV,
    "application/json": FormatClass.JSON,
    "text/markdown": FormatClass.MARKDOWN,
    "application/xml": FormatClass.XML,
}

SUFFIX_TABLE: Final[Dict[str, FormatClass]] = {
    ".txt": FormatClass.PLAIN_TEXT,
    ".pdf": FormatClass.PDF,
    ".docx": FormatClass.WORD_DOCUMENT,
    ".doc": FormatClass.WORD_DOCUMENT,
    ".rtf": FormatClass.RICH_TEXT,
    ".html": FormatClass.HTML,
    ".htm": FormatClass.HTML,
    ".csv": FormatClass.CSV,
    ".json": FormatClass.JSON,
    ".md": FormatClass.MARKDOWN,
    ".xml": FormatClass.XML,
}


def _normalise_media_type(content_type: Optional[str]) -> str:
    """Drop ``;charset=...`` style parameters and normalise case."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def _suffix(filename: Optional[str]) -> str:
    """Return the lower-cased text from the last dot on, ``""`` when there is none.

    A name that is only a suffix (``".md"``) counts as that suffix, unlike
    :func:`os.path.splitext` which treats it as a dotfile.
    """
    if not filename:
        return ""
    name = os.path.basename(filename)
    _, dot, extension = name.rpartition(".")
    return f"{dot}{extension}".lower() if dot else ""


def classify(content_type: Optional[str], filename: Optional[str]) -> FormatClass:
    """
    Return the format class for a document.

    Args:
        content_type: Declared media type, possibly empty or ``None``.
        filename: Original filename, possibly ``None``.

    Returns:
        The matching :class:`FormatClass`, ``UNSUPPORTED`` when neither signal
        matches a known format.
    """
    media_type = _normalise_media_type(content_type)
    if media_type in MEDIA_TYPE_TABLE:
        return MEDIA_TYPE_TABLE[media_type]
    return SUFFIX_TABLE.get(_suffix(filename), FormatClass.UNSUPPORTED)
