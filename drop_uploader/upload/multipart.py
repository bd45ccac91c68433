"""Single-file multipart/form-data encoding."""

import time

from drop_uploader.upload.models import EncodedBody, UploadTarget

BOUNDARY_PREFIX = "----DropUploader"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_HEADER_ESCAPES = str.maketrans({'"': "%22", "\r": "%0D", "\n": "%0A"})
_LINE_BREAKS = str.maketrans("", "", "\r\n")


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_DIGITS[remainder])
    return "".join(reversed(digits))


def make_boundary() -> str:
    """Fixed prefix plus the current time in milliseconds, base-36 encoded."""
    return BOUNDARY_PREFIX + to_base36(time.time_ns() // 1_000_000)


def _quote(value: str) -> str:
    return value.translate(_HEADER_ESCAPES)


def _part_content_type(mime_type: str | None) -> str:
    return (mime_type or "").translate(_LINE_BREAKS).strip() or DEFAULT_CONTENT_TYPE


def encode(target: UploadTarget, field_name: str, boundary: str | None = None) -> EncodedBody:
    """Build a one-part multipart body holding ``target`` under ``field_name``."""
    boundary = boundary or make_boundary()
    part_header = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{_quote(field_name)}"; '
        f'filename="{_quote(target.name)}"\r\n'
        f"Content-Type: {_part_content_type(target.mime_type)}\r\n"
        "\r\n"
    )
    part_footer = f"\r\n--{boundary}--\r\n"
    body = part_header.encode("utf-8") + target.data + part_footer.encode("utf-8")
    return EncodedBody(
        content_type=f"multipart/form-data; boundary={boundary}",
        body=body,
    )
