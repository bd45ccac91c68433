import httpx

from drop_uploader.transport.base import BaseHttpClient, HttpResponse
from drop_uploader.upload.exceptions import UploadNetworkError


class HttpxClientAdapter(BaseHttpClient):
    """Outbound HTTP built on httpx.AsyncClient."""

    def __init__(
        self,
        *,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def post(self, url: str, headers: dict[str, str], body: bytes) -> HttpResponse:
        try:
            response = await self._client.post(url, headers=headers, content=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UploadNetworkError(str(exc) or type(exc).__name__) from exc
        except (ValueError, TypeError) as exc:
            # request could not be built, e.g. a header value outside ASCII
            raise UploadNetworkError(f"Invalid request: {exc}") from exc
        return HttpResponse(status_code=response.status_code, content=response.content)

    async def aclose(self) -> None:
        await self._client.aclose()
