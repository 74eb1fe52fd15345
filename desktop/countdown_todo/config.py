"""Client Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default: the client runs with no environment at all
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - COUNTDOWN_TODO_ prefix: avoids collisions with the host runtime's variables
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COUNTDOWN_TODO_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Local preferences (compact mode, countdown precision)
    preferences_path: Path = Path.home() / ".countdown_todo" / "preferences.json"

    # Live countdown recompute interval
    tick_interval_seconds: float = Field(1.0, gt=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
