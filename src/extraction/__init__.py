"""Document text extraction: data model and format classification.

The dispatcher itself lives in :py:mod:`src.extraction.pipeline`; it pulls in
every decoder, so it is not imported here.  Decoders depend on this package's
types and importing the pipeline eagerly would make that dependency circular.
"""

from __future__ import annotations

from .classifier import classify
from .types import DocumentHandle, ExtractionResult, FormatClass, InMemoryDocument

__all__: list[str] = [
    "classify",
    "DocumentHandle",
    "ExtractionResult",
    "FormatClass",
    "InMemoryDocument",
]
