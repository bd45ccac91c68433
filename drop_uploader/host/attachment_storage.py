import asyncio
from pathlib import Path

from drop_uploader.host.base import BaseAttachmentStorage
from drop_uploader.logging.logger import Log


def available_path(folder: Path, name: str) -> Path:
    """Return ``folder/name``, or ``folder/<stem> N<suffix>`` if that is taken."""
    candidate = folder / name
    stem, suffix = Path(name).stem, Path(name).suffix
    counter = 1
    while candidate.exists():
        candidate = folder / f"{stem} {counter}{suffix}"
        counter += 1
    return candidate


class LocalAttachmentStorage(BaseAttachmentStorage):
    """Writes attachments into a folder, relative to the note when one is given.

    A relative ``attachments_dir`` resolves against the note's directory;
    without a note it resolves against ``root``.
    """

    def __init__(self, root: Path, attachments_dir: str = "attachments") -> None:
        self._root = root
        self._attachments_dir = attachments_dir

    async def save(self, name: str, data: bytes, source_path: str | None = None) -> str:
        folder = self._resolve_folder(source_path)
        folder.mkdir(parents=True, exist_ok=True)
        path = available_path(folder, name)
        await asyncio.to_thread(path.write_bytes, data)
        Log.info(f"Saved attachment {path} ({len(data)} bytes)")
        return path.name

    def _resolve_folder(self, source_path: str | None) -> Path:
        base = Path(source_path).parent if source_path else self._root
        return base / self._attachments_dir
