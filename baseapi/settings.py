from __future__ import annotations

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_URL = "http://localhost:3001"


class Settings(BaseSettings):
    # Env vars win; `.env` files support local dev. Prefer ./.env, then ../.env.
    model_config = SettingsConfigDict(env_file=(".env", "../.env"), extra="ignore")

    # Origin every relative endpoint is resolved against.
    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias=AliasChoices("API_URL", "api_url"),
    )

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    @field_validator("api_url", mode="before")
    @classmethod
    def _require_absolute_origin(cls, v):
        if v is None or not str(v).strip():
            return DEFAULT_API_URL
        raw = str(v).strip()
        parts = urlsplit(raw)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"API_URL must be an absolute URL like {DEFAULT_API_URL!r}, got {raw!r}")
        return raw


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
