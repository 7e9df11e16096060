"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .sample_catalog import DEMO_VIDEO_URL

RecordStoreKind = Literal["memory", "remote", "sql"]


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="StreamHub", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    record_store: RecordStoreKind = Field(default="memory", alias="RECORD_STORE")

    backend_url: HttpUrl | None = Field(default=None, alias="BACKEND_URL")
    backend_api_key: str | None = Field(default=None, alias="BACKEND_API_KEY")
    content_table: str = Field(default="content", alias="CONTENT_TABLE")
    favorites_table: str = Field(default="favorites", alias="FAVORITES_TABLE")
    remote_retry_limit: int = Field(
        default=2, alias="REMOTE_RETRY_LIMIT", ge=0, le=10
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./streamhub.db", alias="DATABASE_URL"
    )

    fetch_timeout_seconds: float = Field(
        default=15.0, alias="FETCH_TIMEOUT", gt=0, le=300
    )
    demo_latency_seconds: float = Field(
        default=0.0, alias="DEMO_LATENCY", ge=0, le=10
    )
    demo_video_url: str = Field(default=DEMO_VIDEO_URL, alias="DEMO_VIDEO_URL")

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("record_store", mode="before")
    @classmethod
    def _normalise_record_store(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or "memory"
        return value

    @field_validator("content_table", "favorites_table")
    @classmethod
    def _validate_table_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or not cleaned.replace("_", "").isalnum():
            raise ValueError("Table names may only contain letters, digits and underscores")
        return cleaned

    @model_validator(mode="after")
    def _require_backend_for_remote(self) -> "Settings":
        """The remote record store needs an endpoint and a key."""

        if self.record_store == "remote":
            if self.backend_url is None:
                raise ValueError("BACKEND_URL is required when RECORD_STORE=remote")
            if not self.backend_api_key:
                raise ValueError("BACKEND_API_KEY is required when RECORD_STORE=remote")
        return self

    @property
    def backend_base_url(self) -> str | None:
        """Return the backend URL without a trailing slash."""

        if self.backend_url is None:
            return None
        return str(self.backend_url).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
