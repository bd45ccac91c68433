from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """File category derived from the file name's extension."""

    IMAGE = "image"
    PDF = "pdf"
    OTHER = "other"


@dataclass(frozen=True)
class UploadTarget:
    """An in-memory file captured from a drop or paste event."""

    name: str
    data: bytes
    mime_type: str | None = None


@dataclass(frozen=True)
class UploadSuccess:
    url: str


@dataclass(frozen=True)
class UploadFailure:
    reason: str


UploadResult = UploadSuccess | UploadFailure


@dataclass(frozen=True)
class EncodedBody:
    """A ready-to-send multipart/form-data payload."""

    content_type: str
    body: bytes
