import json
from pathlib import Path
from typing import Any

from drop_uploader.host.base import BaseSettingsStore
from drop_uploader.logging.logger import Log


class JsonFileSettingsStore(BaseSettingsStore):
    """Keeps the settings blob in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            Log.warning(f"Could not read settings from {self._path}: {exc}")
            return None
        if not isinstance(data, dict):
            Log.warning(f"Settings file {self._path} does not hold an object")
            return None
        return data

    def save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
