"""
Centralised settings loader (pydantic-settings, reads env + .env).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ────────────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]   # JSON list in env, e.g. ["https://app.example"]

    # ─── database: either a plain URL or a Cloud SQL instance ───────
    database_url: str | None = None
    cloud_sql_connection_name: str | None = None
    db_user: str | None = None
    db_pass: str | None = None
    db_name: str | None = None

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
