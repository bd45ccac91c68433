import json
from collections.abc import Callable

import httpx
import pytest

from drop_uploader.config.upload_config import UploadConfig
from drop_uploader.upload.models import UploadTarget

PNG_BYTES = b"\x89PNG\x1a\x00\x00\x00IHDRfake-image-bytes"
PDF_BYTES = b"%PDF-1.7 fake pdf body %%EOF"


@pytest.fixture()
def png_target() -> UploadTarget:
    return UploadTarget(name="photo.png", data=PNG_BYTES, mime_type="image/png")


@pytest.fixture()
def pdf_target() -> UploadTarget:
    return UploadTarget(name="report.pdf", data=PDF_BYTES, mime_type="application/pdf")


@pytest.fixture()
def upload_config() -> UploadConfig:
    return UploadConfig(endpoint="https://uploads.example.com/api", response_path="url")


@pytest.fixture()
def json_reply() -> Callable[[int, object], httpx.MockTransport]:
    """Build a MockTransport answering every request with one JSON reply."""

    def _build(status_code: int, payload: object) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, content=json.dumps(payload).encode())

        return httpx.MockTransport(handler)

    return _build
