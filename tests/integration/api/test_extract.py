from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.api.app import app
from src.core.config import get_settings
from tests.conftest import MockSettings, build_docx, build_pdf

pytestmark = [pytest.mark.integration]

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def client(mock_settings: MockSettings) -> TestClient:
    """Provides a TestClient instance with dependency overrides."""
    app.dependency_overrides[get_settings] = lambda: mock_settings
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-Request-ID": "test-req-id-extract"}


def test_extract_plain_text_returns_expected_shape(
    client: TestClient, headers: dict[str, str]
) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("hello.txt", b"Hello, world!\n", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "test-req-id-extract"
    payload = response.json()
    assert payload["text"] == "Hello, world!\n"
    assert payload["filename"] == "hello.txt"
    assert payload["mime_type"] == "text/plain"
    assert payload["format"] == "plain_text"
    assert payload["size_bytes"] == 14
    assert payload["request_id"] == "test-req-id-extract"
    assert payload["pipeline_version"] == "v_test_pipeline"
    assert payload["processing_ms"] >= 0


def test_extract_pdf(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("doc.pdf", build_pdf(["Invoice 42"]), "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json()["format"] == "pdf"
    assert response.json()["text"].strip() == "Invoice 42"


def test_extract_docx_by_suffix(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={
            "file": (
                "letter.docx",
                build_docx(["Hello", "World"]),
                "application/octet-stream",
            )
        },
    )

    assert response.status_code == 200
    assert response.json()["format"] == "word_document"
    assert response.json()["text"] == "Hello\nWorld"


def test_extract_html(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("p.html", b"<div>Hello <b>World</b></div>", "text/html")},
    )

    assert response.status_code == 200
    assert response.json()["text"] == "Hello World"


def test_extract_empty_text_file(client: TestClient) -> None:
    response = client.post(
        "/v1/extract", files={"file": ("empty.txt", b"", "text/plain")}
    )

    assert response.status_code == 200
    assert response.json()["text"] == ""
    assert response.json()["size_bytes"] == 0


def test_request_id_generated_when_absent(client: TestClient) -> None:
    response = client.post(
        "/v1/extract", files={"file": ("a.md", b"# A", "text/markdown")}
    )

    generated = response.headers["X-Request-ID"]
    assert len(generated) == 32
    assert response.json()["request_id"] == generated


def test_unsupported_format_returns_415(
    client: TestClient, headers: dict[str, str]
) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("photo.png", b"\x89PNG\r\n", "image/png")},
        headers=headers,
    )

    assert response.status_code == 415
    payload = response.json()
    assert payload["error"]["code"] == "unsupported_format"
    assert payload["error"]["message"] == "unsupported_format: image/png"
    assert payload["error"]["request_id"] == "test-req-id-extract"
    assert payload["error"]["format"] is None
    assert payload["detail"] == "image/png"


def test_invalid_utf8_returns_400(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("latin.txt", "über".encode("latin-1"), "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "read_error"


def test_malformed_pdf_returns_422(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("bad.pdf", b"not a pdf", "application/pdf")},
    )

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "decode_error"
    assert payload["error"]["format"] == "pdf"
    assert payload["error"]["message"].startswith("decode_error (pdf):")


def test_corrupt_docx_returns_422(client: TestClient) -> None:
    response = client.post(
        "/v1/extract",
        files={"file": ("bad.docx", b"PK\x03\x04broken", DOCX_MIME)},
    )

    assert response.status_code == 422
    assert response.json()["error"]["format"] == "word_document"


def test_oversized_upload_returns_413(
    client: TestClient, mock_settings: MockSettings
) -> None:
    mock_settings.max_file_size_mb = 1
    with patch(
        "src.api.routes.extract.extract_document", new_callable=AsyncMock
    ) as mock_extract:
        response = client.post(
            "/v1/extract",
            files={"file": ("big.txt", b"x" * (1024 * 1024 + 1), "text/plain")},
        )

    assert response.status_code == 413
    assert response.json()["error"]["code"] == 413
    mock_extract.assert_not_awaited()


def test_missing_file_field_returns_422(client: TestClient) -> None:
    response = client.post("/v1/extract", data={"other": "value"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"
