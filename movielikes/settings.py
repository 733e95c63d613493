from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Local dev: load from .env automatically.
    # In production: you typically inject real env vars instead.
    model_config = SettingsConfigDict(
        env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )

    # Env vars:
    # - OMDB_API_KEY (required for real catalog lookups)
    # - OMDB_HOST (optional)
    # - OMDB_SCHEME (optional, http or https)
    # - OMDB_TIMEOUT_SECONDS (optional)
    # - LOG_LEVEL (optional)
    omdb_api_key: str = Field(default="", validation_alias="OMDB_API_KEY")
    omdb_host: str = Field(default="www.omdbapi.com", validation_alias="OMDB_HOST")
    omdb_scheme: str = Field(default="http", validation_alias="OMDB_SCHEME")
    omdb_timeout_seconds: float = Field(default=10.0, validation_alias="OMDB_TIMEOUT_SECONDS")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def model_post_init(self, __context):  # type: ignore[override]
        scheme = (self.omdb_scheme or "").lower().strip()
        self.omdb_scheme = scheme if scheme in ("http", "https") else "http"


def get_settings() -> Settings:
    """Load settings from environment.

    Keep this as the single canonical constructor for Settings(). FastAPI
    dependencies and tests can override/monkeypatch this function.
    """
    return Settings()
