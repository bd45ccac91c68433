from pydantic import ValidationError

from drop_uploader.config.exceptions import ConfigError
from drop_uploader.config.upload_config import HeaderEntry, UploadConfig
from drop_uploader.host.base import BaseSettingsStore
from drop_uploader.logging.logger import Log


class ConfigManager:
    """Owns the single in-memory UploadConfig and persists every mutation.

    The orchestrator and any settings editor share one manager, so they always
    observe the same configuration object.
    """

    def __init__(self, store: BaseSettingsStore) -> None:
        self._store = store
        self._config = UploadConfig()

    @property
    def config(self) -> UploadConfig:
        return self._config

    def load(self) -> UploadConfig:
        """Load the saved blob, filling missing keys from defaults."""
        data = self._store.load() or {}
        try:
            self._config = UploadConfig.model_validate(data)
        except ValidationError as exc:
            Log.warning(f"Ignoring invalid saved upload settings: {exc}")
            self._config = UploadConfig()
        return self._config

    def update(self, **changes: object) -> UploadConfig:
        """Apply field changes and persist the result."""
        unknown = set(changes) - set(UploadConfig.model_fields)
        if unknown:
            raise ConfigError(f"Unknown upload settings: {sorted(unknown)}")
        merged = {**self._config.model_dump(), **changes}
        try:
            self._config = UploadConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid upload settings: {exc}") from exc
        self.save()
        return self._config

    def add_header(self, key: str = "", value: str = "") -> None:
        self._config.headers.append(HeaderEntry(key=key, value=value))
        self.save()

    def set_header(
        self,
        index: int,
        *,
        key: str | None = None,
        value: str | None = None,
    ) -> None:
        entry = self._header_at(index)
        if key is not None:
            entry.key = key
        if value is not None:
            entry.value = value
        self.save()

    def remove_header(self, index: int) -> None:
        self._header_at(index)
        del self._config.headers[index]
        self.save()

    def save(self) -> None:
        self._store.save(self._config.model_dump(mode="json"))
        Log.debug("Upload settings saved")

    def _header_at(self, index: int) -> HeaderEntry:
        if not 0 <= index < len(self._config.headers):
            raise ConfigError(f"No header at position {index}")
        return self._config.headers[index]
