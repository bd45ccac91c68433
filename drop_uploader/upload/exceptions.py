class UploadError(Exception):
    """Base exception for a failed upload attempt."""


class UploadNetworkError(UploadError):
    """Raised when the request never produced an HTTP response."""


class UploadStatusError(UploadError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server responded with status {status_code}")
        self.status_code = status_code


class ResponseParseError(UploadError):
    """Raised when a 2xx response body is not valid JSON."""


class ResponsePathError(UploadError):
    """Raised when the configured path does not resolve to a string."""

    def __init__(self, path: str) -> None:
        super().__init__(f'Could not extract URL from response using path "{path}"')
        self.path = path
