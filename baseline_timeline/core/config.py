# baseline_timeline/core/config.py
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WIDELY_AVAILABLE_FEED_URL = (
    "https://web-platform-dx.github.io/web-features-explorer/widely-available.xml"
)
DEFAULT_NEWLY_AVAILABLE_FEED_URL = (
    "https://web-platform-dx.github.io/web-features-explorer/newly-available.xml"
)


class Settings(BaseSettings):
    # ---- Feeds ----
    WIDELY_AVAILABLE_FEED_URL: str = DEFAULT_WIDELY_AVAILABLE_FEED_URL
    NEWLY_AVAILABLE_FEED_URL: str = DEFAULT_NEWLY_AVAILABLE_FEED_URL

    # ---- HTTP ----
    FEED_FETCH_TIMEOUT_S: float = 15
    FEED_USER_AGENT: str = "css-baseline-timeline/1.0"

    # ---- Logging ----
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
