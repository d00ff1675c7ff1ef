"""Application settings loaded from environment / .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Item store ────────────────────────────────────────
    data_path: str = "data/items.json"

    # ── Stats cache ───────────────────────────────────────
    stats_debounce_seconds: float = 0.3
    stats_poll_interval_seconds: float = 1.0  # 0 disables file polling

    # ── API ───────────────────────────────────────────────
    default_page_size: int = 10
    allowed_origins: str = "http://localhost:3000"


@lru_cache
def get_settings() -> Settings:
    return Settings()
