import json

from drop_uploader.config.upload_config import UploadConfig
from drop_uploader.logging.logger import Log
from drop_uploader.transport.base import BaseHttpClient, HttpResponse
from drop_uploader.upload.exceptions import (
    ResponseParseError,
    ResponsePathError,
    UploadError,
    UploadStatusError,
)
from drop_uploader.upload.models import UploadFailure, UploadResult, UploadSuccess, UploadTarget
from drop_uploader.upload.multipart import encode
from drop_uploader.upload.response_extractor import extract


class UploadClient:
    """Posts one file to the configured endpoint and pulls the URL out of the reply."""

    def __init__(self, http_client: BaseHttpClient) -> None:
        self._http = http_client

    async def upload(self, target: UploadTarget, config: UploadConfig) -> UploadResult:
        """Upload ``target``. Every failure is reported as UploadFailure, never raised."""
        Log.info(f"Uploading {target.name} ({len(target.data)} bytes) to {config.endpoint}")
        try:
            url = await self._send(target, config)
        except UploadError as exc:
            Log.error(f"Upload of {target.name} failed: {exc}")
            return UploadFailure(reason=str(exc))
        Log.info(f"Uploaded {target.name} -> {url}")
        return UploadSuccess(url=url)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, target: UploadTarget, config: UploadConfig) -> str:
        encoded = encode(target, config.effective_field_name)
        headers = self._build_headers(config, encoded.content_type)
        response = await self._http.post(config.endpoint, headers, encoded.body)
        if not 200 <= response.status_code < 300:
            raise UploadStatusError(response.status_code)
        data = self._parse_json(response)
        url = extract(data, config.response_path)
        if url is None:
            raise ResponsePathError(config.response_path)
        return url

    @staticmethod
    def _build_headers(config: UploadConfig, content_type: str) -> dict[str, str]:
        headers = {
            key: value
            for key, value in config.header_mapping().items()
            if key.lower() != "content-type"
        }
        headers["Content-Type"] = content_type
        return headers

    @staticmethod
    def _parse_json(response: HttpResponse) -> object:
        try:
            return json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ResponseParseError(f"Invalid JSON response: {exc}") from exc
