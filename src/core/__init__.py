from __future__ import annotations

# Re-export settings and the failure taxonomy for ergonomic imports.
from .config import Settings, get_settings  # noqa: F401
from .exceptions import (  # noqa: F401
    DecodeError,
    ExtractionFailure,
    FailureKind,
    ReadError,
    UnsupportedFormatError,
)

__all__: list[str] = [
    "Settings",
    "get_settings",
    "ExtractionFailure",
    "FailureKind",
    "UnsupportedFormatError",
    "ReadError",
    "DecodeError",
]
