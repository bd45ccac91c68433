from dataclasses import dataclass, field

from drop_uploader.config.upload_config import PdfDisposition, UploadConfig
from drop_uploader.upload.classifier import classify
from drop_uploader.upload.models import Category, UploadTarget


@dataclass(frozen=True)
class BatchPlan:
    """What to do with the files of one drop or paste event."""

    intercept: bool
    images: list[UploadTarget] = field(default_factory=list)
    pdfs: list[UploadTarget] = field(default_factory=list)


def should_intercept(target: UploadTarget, config: UploadConfig) -> bool:
    category = classify(target.name)
    if category is Category.IMAGE:
        return True
    return category is Category.PDF and config.pdf_disposition is not PdfDisposition.SAVE_LOCALLY


def plan_batch(files: list[UploadTarget], config: UploadConfig) -> BatchPlan:
    """Partition an event's files. Other files are never intercepted."""
    intercepted = [target for target in files if should_intercept(target, config)]
    if not intercepted:
        return BatchPlan(intercept=False)
    return BatchPlan(
        intercept=True,
        images=[t for t in intercepted if classify(t.name) is Category.IMAGE],
        pdfs=[t for t in intercepted if classify(t.name) is Category.PDF],
    )
