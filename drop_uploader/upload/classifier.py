from drop_uploader.upload.models import Category

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg", "avif", "ico"})
PDF_EXTENSIONS = frozenset({"pdf"})


def file_extension(name: str) -> str:
    """Lowercase text after the last dot, or an empty string without a dot."""
    _, dot, ext = name.rpartition(".")
    return ext.lower() if dot else ""


def classify(name: str) -> Category:
    ext = file_extension(name)
    if ext in IMAGE_EXTENSIONS:
        return Category.IMAGE
    if ext in PDF_EXTENSIONS:
        return Category.PDF
    return Category.OTHER


def is_image(name: str) -> bool:
    return classify(name) is Category.IMAGE


def is_pdf(name: str) -> bool:
    return classify(name) is Category.PDF
