from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FILE_FIELD_NAME = "file"


class PdfDisposition(str, Enum):
    """How dropped or pasted PDF files are handled."""

    SAVE_LOCALLY = "default"
    UPLOAD = "upload"
    ASK_EACH_TIME = "ask"


class HeaderEntry(BaseModel):
    """One user-configured HTTP header. Keys are not required to be unique."""

    key: str = ""
    value: str = ""


class UploadConfig(BaseModel):
    """User-owned upload configuration, persisted by the host as an opaque blob."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    endpoint: str = ""
    headers: list[HeaderEntry] = Field(default_factory=list)
    file_field_name: str = DEFAULT_FILE_FIELD_NAME
    response_path: str = ""
    pdf_disposition: PdfDisposition = PdfDisposition.SAVE_LOCALLY

    @property
    def effective_field_name(self) -> str:
        """Form field name to send; blank values fall back to ``file``."""
        return self.file_field_name.strip() or DEFAULT_FILE_FIELD_NAME

    def header_mapping(self) -> dict[str, str]:
        """Collapse header entries into a mapping.

        Entries with a blank key are skipped and later duplicates win.
        """
        headers: dict[str, str] = {}
        for entry in self.headers:
            key = entry.key.strip()
            if key:
                headers[key] = entry.value
        return headers
