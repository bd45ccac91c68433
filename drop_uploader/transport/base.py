from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class HttpResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    content: bytes


class BaseHttpClient(ABC):
    """Contract for the outbound HTTP primitive used by the upload client."""

    @abstractmethod
    async def post(self, url: str, headers: dict[str, str], body: bytes) -> HttpResponse:
        """Send a POST request and return the response, whatever its status.

        Raises:
            UploadNetworkError: if no response could be obtained.
        """

    async def aclose(self) -> None:
        """Release pooled connections. Nothing to release by default."""
