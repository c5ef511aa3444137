"""
Application configuration with environment variable support.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings read from the environment (and ``.env``)."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PORT: int = 3001
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    CORS_ALLOW_ORIGINS: str = "*"

    # Request defaults
    DEFAULT_LIMIT: int = 25
    DEFAULT_HOURS: float = 24.0

    @property
    def cors_origins(self) -> list[str]:
        origins = [item.strip() for item in self.CORS_ALLOW_ORIGINS.split(",") if item.strip()]
        return origins or ["*"]


# Upstream listing endpoints
REDDIT_LISTING_URL = "https://www.reddit.com/r/"
REDDIT_PERMALINK_BASE = "https://reddit.com"
SHORT_LISTING_PREFIX = "r/"

# HTTP Client Configuration
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
HTTP_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
}
FETCH_TIMEOUT_SECONDS: float = 10.0


@dataclass(frozen=True)
class FetcherConfig:
    """Immutable upstream request settings, built once at startup."""

    base_url: str = REDDIT_LISTING_URL
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(HTTP_HEADERS)))
    timeout: float = FETCH_TIMEOUT_SECONDS


settings = Settings()
