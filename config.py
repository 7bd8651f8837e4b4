"""
Centralised settings loader (pydantic-settings, reads `.env`).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ───────────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    database_url: str | None = Field(None, validation_alias="DATABASE_URL")
    auto_create_tables: bool = Field(False, validation_alias="AUTO_CREATE_TABLES")
    cors_origins: list[str] = Field(["*"], validation_alias="CORS_ORIGINS")

    # ─── auth ───────────────────────────────────────────────────────
    jwt_secret: str = Field("changeme", validation_alias="JWT_SECRET")
    jwt_ttl_minutes: int = Field(60 * 24, validation_alias="JWT_TTL_MINUTES")

    # ─── nutrition providers ────────────────────────────────────────
    usda_api_key: str | None = Field(None, validation_alias="USDA_API_KEY")
    usda_base_url: str = Field(
        "https://api.nal.usda.gov/fdc/v1", validation_alias="USDA_BASE_URL"
    )
    open_food_facts_url: str = Field(
        "https://world.openfoodfacts.org/api/v0", validation_alias="OPEN_FOOD_FACTS_URL"
    )
    http_timeout_s: float = Field(15.0, validation_alias="HTTP_TIMEOUT_S")

    # ─── Gemini ─────────────────────────────────────────────────────
    gemini_api_key: str | None = Field(None, validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field("models/gemini-2.0-flash", validation_alias="GEMINI_MODEL")

    # allow unrelated env-vars without crashing
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
