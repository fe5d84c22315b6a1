"""
Core Custom Exceptions

This module defines the failure taxonomy of the extraction pipeline.  Every
failure raised by the loader, the markup stripper or a container decoder is an
:class:`ExtractionFailure` so that callers (the HTTP layer, library users) can
render a specific message from a single ``except`` clause.

Defined Exceptions:
- `ExtractionFailure`: Base class.  Carries ``kind``, ``detail`` and, for
  decode failures, the ``format`` that failed.
- `UnsupportedFormatError`: Classification found no matching strategy.  The
  ``detail`` is the offending declared media type.  Raised before any byte of
  the document is read.
- `ReadError`: The loader could not materialise the payload as bytes/text.
- `DecodeError`: A decoder rejected its input (corrupt container, encryption,
  missing package part).

None of these are retried: every failure is terminal for the extraction call.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover – import for annotations only
    from src.extraction.types import FormatClass

__all__: list[str] = [
    "FailureKind",
    "ExtractionFailure",
    "UnsupportedFormatError",
    "ReadError",
    "DecodeError",
]


class FailureKind(str, Enum):
    """Machine-readable failure category (also used as the API error code)."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    READ_ERROR = "read_error"
    DECODE_ERROR = "decode_error"


class ExtractionFailure(Exception):
    """
    Base class for every failure surfaced by the extraction pipeline.

    Attributes:
        kind: Which of the three failure categories occurred.
        detail: Human-readable description, or the declared media type for
            unsupported formats.
        format: The format class whose decoder failed, when known.
    """

    kind: FailureKind = FailureKind.DECODE_ERROR

    def __init__(
        self,
        detail: str,
        *,
        format: Optional["FormatClass"] = None,  # noqa: A002 – domain term
    ) -> None:
        self.detail = detail
        self.format = format
        super().__init__(detail)

    def __str__(self) -> str:
        if self.format is not None:
            return f"{self.kind.value} ({self.format.value}): {self.detail}"
        return f"{self.kind.value}: {self.detail}"


class UnsupportedFormatError(ExtractionFailure):
    """Raised when neither the declared media type nor the suffix is supported."""

    kind = FailureKind.UNSUPPORTED_FORMAT


class ReadError(ExtractionFailure):
    """Raised when the document payload cannot be read or decoded as UTF-8."""

    kind = FailureKind.READ_ERROR


class DecodeError(ExtractionFailure):
    """Raised by container and markup decoders when they reject their input.

    The failing ``format`` is always set so that callers can tell a broken PDF
    from a broken Word package.
    """

    kind = FailureKind.DECODE_ERROR
