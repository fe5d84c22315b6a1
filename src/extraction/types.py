from __future__ import annotations

import mimetypes
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable

__all__: list[str] = [
    "DocumentHandle",
    "InMemoryDocument",
    "FormatClass",
    "ExtractionResult",
]


@runtime_checkable
class DocumentHandle(Protocol):
    """
    Read-only view of a user-supplied document.

    ``starlette.datastructures.UploadFile`` satisfies this protocol, so HTTP
    uploads can be handed to the pipeline directly.  The pipeline only borrows
    the handle for the duration of one call.

    Attributes:
        content_type: Declared media type; may be empty or absent.
        filename: Original name, only inspected for its suffix.
        size: Payload size in bytes when known.
    """

    content_type: Optional[str]
    filename: Optional[str]
    size: Optional[int]

    async def seek(self, offset: int) -> Any: ...

    async def read(self, size: int = -1) -> bytes: ...


class FormatClass(str, Enum):
    """Closed set of formats the classifier can assign to a document."""

    PLAIN_TEXT = "plain_text"
    PDF = "pdf"
    WORD_DOCUMENT = "word_document"
    RICH_TEXT = "rich_text"
    HTML = "html"
    CSV = "csv"
    JSON = "json"
    MARKDOWN = "markdown"
    XML = "xml"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class InMemoryDocument:
    """
    Immutable in-memory document implementing :class:`DocumentHandle`.

    Used by library callers and scripts that do not go through the HTTP
    layer.  ``seek`` is a no-op because every ``read`` returns the whole
    payload from the start.
    """

    filename: Optional[str]
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    async def seek(self, offset: int) -> int:
        return offset

    async def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            return self.content
        return self.content[:size]

    @classmethod
    def from_path(
        cls, path: Union[str, Path], content_type: Optional[str] = None
    ) -> "InMemoryDocument":
        """Load *path* from disk, guessing the media type when not supplied."""
        file_path = Path(path)
        if content_type is None:
            content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type,
        )


@dataclass
class ExtractionResult:
    """
    Extracted text plus the metadata gathered along the way.

    Attributes:
        filename: Original filename of the document
        mime_type: Declared media type, as received
        format: Format class chosen by the classifier
        size_bytes: Payload size in bytes
        text: Extracted plain text (may be empty)
        pipeline_version: Version of the extraction pipeline
        processing_ms: Time taken to extract in milliseconds
    """

    filename: str
    mime_type: str
    format: FormatClass
    size_bytes: int
    text: str
    pipeline_version: str = "v0.1.0"
    processing_ms: float = 0.0

    def dict(self) -> dict[str, Any]:
        """Return a serialisable ``dict`` with the format as its string value."""
        data = asdict(self)
        data["format"] = self.format.value
        return data
