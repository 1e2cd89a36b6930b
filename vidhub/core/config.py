"""
VidHub Core Settings — engagement layer over the video catalog.

Covers the relation store (likes, subscriptions, playlist membership),
the comment feed and the viewer context passed in by the gateway.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8",
        env_prefix="VIDHUB_", case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "VidHub"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    # ── PostgreSQL ───────────────────────────────────────────────────────
    db_host: str = "postgres"
    db_port: int = 5432
    db_user: str = "vidhub"
    db_password: str = "vidhub_secret"
    db_name: str = "vidhub"
    db_echo: bool = False

    # Full URL override, e.g. sqlite+aiosqlite:///./vidhub.db for local runs
    db_url: Optional[str] = None

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # ── Viewer context ───────────────────────────────────────────────────
    # Header set by the auth gateway once the session has been verified
    viewer_header: str = "X-User-Id"

    # ── Feeds ────────────────────────────────────────────────────────────
    default_page_size: int = 10
    max_page_size: int = 100

    # ── Relations ────────────────────────────────────────────────────────
    allow_self_subscription: bool = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
