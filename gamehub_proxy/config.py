"""Immutable runtime configuration for the proxy."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Proxy settings, read from ``GAMEHUB_*`` environment variables or ``.env``.

    ``secret_key`` has no default: a proxy that cannot sign requests refuses
    to start rather than failing per request.
    """

    # Signing
    secret_key: str = Field(..., min_length=1)
    placeholder_token: str = Field("fake-token", min_length=1)

    # Upstreams
    game_api_base: str = "https://landscape-api.vgabc.com"
    manifest_base: str = "https://raw.githubusercontent.com/gamehublite/gamehub_api/main"
    news_base: str = "https://gamehub-news-aggregator.secureflex.workers.dev"
    token_issuer_url: Optional[str] = None
    token_issuer_auth: str = ""
    http_timeout: float = 30.0

    # Key-value stores
    redis_url: Optional[str] = None
    token_store_key: str = "gamehub_token"
    free_content_key: str = "free_games_data"

    # Default page sizes
    news_page_size: int = 4
    topic_page_size: int = 30
    component_page_size: int = 10

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GAMEHUB_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, validated once."""
    return Settings()
