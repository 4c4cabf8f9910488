"""Configuration settings loaded from .env file."""

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from .env file.

    Timer values are in seconds. The version history capacity bounds how
    many snapshots a project keeps; older ones are evicted first.
    """

    # Versioning
    version_history_capacity: int = 50

    # Persistence timers
    autosave_debounce_seconds: float = 2.0
    snapshot_interval_seconds: float = 5 * 60.0
    save_status_display_seconds: float = 2.0

    # Storage
    storage_db_path: Path = Path("./data/novels.db")
    export_dir: Path = Path("./data/exports")
    export_extension: str = ".json"

    # Generative assistant
    llm_model_writing: str = "claude-sonnet-4-5"
    llm_model_summary: str = "claude-haiku-4-5"

    # Logging
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("version_history_capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("version_history_capacity must be >= 1")
        return v

    @field_validator(
        "autosave_debounce_seconds",
        "snapshot_interval_seconds",
        "save_status_display_seconds",
    )
    @classmethod
    def validate_positive_delay(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timer delay must be positive")
        return v

    @field_validator("export_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError("export_extension must look like '.json'")
        return v.lower()

    @field_validator("storage_db_path", "export_dir", "log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode="after")
    def validate_timer_order(self) -> "Settings":
        if self.autosave_debounce_seconds >= self.snapshot_interval_seconds:
            raise ValueError(
                f"autosave_debounce_seconds ({self.autosave_debounce_seconds}) must be less than "
                f"snapshot_interval_seconds ({self.snapshot_interval_seconds})"
            )
        return self


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
