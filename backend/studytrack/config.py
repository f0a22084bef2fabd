from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)
    """Application runtime configuration."""

    app_name: str = "StudyTrack"
    environment: str = "development"
    host: str = os.getenv("ST_HOST", "127.0.0.1")
    port: int = int(os.getenv("ST_PORT", "8080"))
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.getenv("ST_CORS_ORIGINS", "http://127.0.0.1:5173,http://localhost:5173").split(",")
            if origin.strip()
        ]
    )

    storage_backend: str = os.getenv("ST_STORAGE", "sqlite")
    sqlite_path: Path = Path(os.getenv("ST_SQLITE_PATH", "./data/studytrack.db"))
    plan_path: Optional[Path] = Path(os.environ["ST_PLAN_PATH"]) if os.getenv("ST_PLAN_PATH") else None

    locale: str = os.getenv("ST_LOCALE", "de-DE")
    timezone: str = os.getenv("TZ", "Europe/Berlin")

    focus_minutes: int = int(os.getenv("ST_FOCUS_MINUTES", "25"))
    dark_mode: bool = os.getenv("ST_DARK_MODE", "false").lower() == "true"

    log_level: str = os.getenv("ST_LOG_LEVEL", "INFO")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if not value:
            return []
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("focus_minutes")
    @classmethod
    def _positive_focus_minutes(cls, value: int) -> int:
        return max(1, int(value))

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()


settings = Settings()

# Ensure essential directories exist
if settings.storage_backend == "sqlite":
    settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
