# ruff: noqa: E402
from __future__ import annotations

import sys
from pathlib import Path

# Ensure repository root is first on sys.path
_repo_root: Path = Path(__file__).resolve().parent.parent  # tests/ -> repo root
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import struct
from hashlib import md5
from io import BytesIO
from typing import Callable, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import docx
import pytest
from pdfminer.arcfour import Arcfour
from pdfminer.pdfdocument import PDFStandardSecurityHandler
from starlette.datastructures import UploadFile


class MockSettings:  # Does NOT inherit from real Settings
    """Mock Settings class for testing."""

    debug: bool = False
    pipeline_version: str = "v_test_pipeline"
    commit_sha: Optional[str] = None
    max_file_size_mb: int = 10

    def __init__(self, **kwargs):
        """Initialize with optional overrides for any attribute."""
        for key, value in kwargs.items():
            setattr(self, key, value)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@pytest.fixture
def mock_settings():
    """Provide a plain MockSettings instance. Dependency injection is handled by app.dependency_overrides in client fixtures."""
    yield MockSettings()


@pytest.fixture(autouse=True)
def _disable_dotenv(monkeypatch):
    """Prevent the application Settings class from reading the developer *.env* file.

    The fixture patches ``Settings.model_config['env_file']`` to ``None`` so
    that Pydantic skips dotenv processing entirely, and clears the variables
    the default-value tests assert on.
    """

    from src.core.config import Settings  # Imported here to avoid circularity

    monkeypatch.setitem(Settings.model_config, "env_file", None)
    for name in ("DEBUG", "PIPELINE_VERSION", "COMMIT_SHA", "MAX_FILE_SIZE_MB"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Document handles
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_upload_file_factory() -> Callable[..., MagicMock]:
    """Factory to create mock UploadFile objects with awaitable seek/read."""

    def _factory(
        filename: Optional[str], content: bytes, content_type: Optional[str] = None
    ) -> MagicMock:
        mock_file = MagicMock(spec=UploadFile)
        mock_file.filename = filename
        mock_file.content_type = content_type
        mock_file.size = len(content)
        mock_file.file = BytesIO(content)
        mock_file.seek = AsyncMock()
        mock_file.read = AsyncMock(return_value=content)
        return mock_file

    return _factory


# ---------------------------------------------------------------------------
# In-memory fixture documents
# ---------------------------------------------------------------------------


def _padded_password(password: str) -> bytes:
    padding = PDFStandardSecurityHandler.PASSWORD_PADDING
    return (password.encode("latin-1") + padding)[:32]


def _rc4_object_key(file_key: bytes, objid: int) -> bytes:
    seed = file_key + struct.pack("<L", objid)[:3] + struct.pack("<L", 0)[:2]
    return md5(seed).digest()[: len(file_key) + 5]


def build_pdf(
    page_texts: List[str],
    *,
    form_xobject: bool = False,
    owner_password: Optional[str] = None,
    user_password: str = "",
    permissions: int = -60,
) -> bytes:
    """Return a minimal, valid PDF with one Helvetica text line per page.

    With *form_xobject* the text is drawn by a form XObject the page invokes
    with ``Do`` instead of by the page content stream itself.

    With *owner_password* the file is encrypted with the standard security
    handler (RC4, 40-bit, revision 2).  The default *permissions* allow
    printing only, so copying text is forbidden.
    """

    per_page = 3 if form_xobject else 2
    page_ids = [4 + per_page * i for i in range(len(page_texts))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    # (dictionary, stream data or None)
    objects: List[Tuple[bytes, Optional[bytes]]] = [
        (b"<< /Type /Catalog /Pages 2 0 R >>", None),
        (
            f"<< /Type /Pages /Kids [{kids}] /Count {len(page_texts)} >>".encode(),
            None,
        ),
        (b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>", None),
    ]
    for page_id, text in zip(page_ids, page_texts):
        text_ops = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
        resources = "/Font << /F1 3 0 R >>"
        if form_xobject:
            resources += f" /XObject << /Fm1 {page_id + 2} 0 R >>"
        objects.append(
            (
                (
                    "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                    f"/Resources << {resources} >> "
                    f"/Contents {page_id + 1} 0 R >>"
                ).encode(),
                None,
            )
        )
        if form_xobject:
            objects.append((b"", b"q /Fm1 Do Q"))
            objects.append(
                (
                    b"/Type /XObject /Subtype /Form /BBox [0 0 612 792] "
                    b"/Resources << /Font << /F1 3 0 R >> >>",
                    text_ops,
                )
            )
        else:
            objects.append((b"", text_ops))

    file_key: Optional[bytes] = None
    trailer_extra = b""
    if owner_password is not None:
        doc_id = md5(b"".join(t.encode("latin-1") for t in page_texts)).digest()
        owner_key = md5(_padded_password(owner_password)).digest()[:5]
        owner_entry = Arcfour(owner_key).encrypt(_padded_password(user_password))
        file_key = md5(
            _padded_password(user_password)
            + owner_entry
            + struct.pack("<L", permissions & 0xFFFFFFFF)
            + doc_id
        ).digest()[:5]
        user_entry = Arcfour(file_key).encrypt(
            PDFStandardSecurityHandler.PASSWORD_PADDING
        )
        objects.append(
            (
                (
                    f"<< /Filter /Standard /V 1 /R 2 /O <{owner_entry.hex()}> "
                    f"/U <{user_entry.hex()}> /P {permissions} >>"
                ).encode(),
                None,
            )
        )
        trailer_extra = b" /Encrypt %d 0 R /ID [<%s> <%s>]" % (
            len(objects),
            doc_id.hex().encode(),
            doc_id.hex().encode(),
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: List[int] = []
    for number, (dictionary, stream) in enumerate(objects, start=1):
        offsets.append(len(out))
        if stream is None:
            body = dictionary
        else:
            if file_key is not None:
                stream = Arcfour(_rc4_object_key(file_key, number)).encrypt(stream)
            body = (
                b"<< %s /Length %d >>\nstream\n" % (dictionary, len(stream))
                + stream
                + b"\nendstream"
            )
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R%s >>\n" % (
        len(objects) + 1,
        trailer_extra,
    )
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


def build_docx(
    paragraphs: List[str], tables: Optional[List[List[List[str]]]] = None
) -> bytes:
    """Return a ``.docx`` package holding *paragraphs*, written by python-docx.

    Each entry of *tables* is a grid of cell texts appended after the
    paragraphs.
    """

    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    for grid in tables or []:
        table = document.add_table(rows=len(grid), cols=len(grid[0]))
        for row, texts in zip(table.rows, grid):
            for cell, text in zip(row.cells, texts):
                cell.text = text
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return build_pdf(["Hello PDF"])


@pytest.fixture
def docx_bytes() -> bytes:
    return build_docx(["First paragraph", "Second paragraph"])
