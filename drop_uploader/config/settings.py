from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    settings_file: Path = Path("drop_uploader.json")
    attachments_dir: str = "attachments"

    http_timeout_seconds: float = Field(default=30.0, gt=0)
