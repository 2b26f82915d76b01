"""
Centralised settings loader (pydantic-settings).

Every field maps to the upper-case env var of the same name, e.g.
``database_url`` ← ``DATABASE_URL``. Values may also come from ``.env``.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ────────────────────────────────────────────────
    env_name: str = "local"
    database_url: str = "sqlite+aiosqlite:///./nutrition.db"
    log_level: str = "INFO"

    # ─── Edamam food database ────────────────────────────────────────
    edamam_app_id: str | None = None
    edamam_app_key: str | None = None
    edamam_base_url: str = "https://api.edamam.com/api/food-database/v2"
    edamam_timeout: float = Field(15.0, gt=0)

    # ─── auth provider (shared HS256 secret) ─────────────────────────
    jwt_secret: str = "changeme"

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
