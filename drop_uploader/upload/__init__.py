from drop_uploader.upload.classifier import classify, is_image, is_pdf
from drop_uploader.upload.models import (
    Category,
    UploadFailure,
    UploadResult,
    UploadSuccess,
    UploadTarget,
)
from drop_uploader.upload.uploader import UploadClient

__all__ = [
    "Category",
    "UploadClient",
    "UploadFailure",
    "UploadResult",
    "UploadSuccess",
    "UploadTarget",
    "classify",
    "is_image",
    "is_pdf",
]
