"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.config import Settings


def test_defaults_use_in_memory_store() -> None:
    """Without configuration the demo catalog backs the app."""

    settings = Settings(_env_file=None)

    assert settings.record_store == "memory"
    assert settings.fetch_timeout_seconds == 15.0
    assert settings.remote_retry_limit == 2
    assert settings.content_table == "content"
    assert settings.favorites_table == "favorites"
    assert settings.backend_base_url is None


def test_record_store_is_case_insensitive() -> None:
    """Record store names should be parsed case-insensitively."""

    settings = Settings(_env_file=None, RECORD_STORE="  SQL ")

    assert settings.record_store == "sql"


def test_blank_record_store_defaults_to_memory() -> None:
    settings = Settings(_env_file=None, RECORD_STORE="")

    assert settings.record_store == "memory"


def test_unknown_record_store_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, RECORD_STORE="firebase")


def test_remote_store_requires_backend_url() -> None:
    """The remote store cannot start without an endpoint."""

    with pytest.raises(ValidationError) as excinfo:
        Settings(_env_file=None, RECORD_STORE="remote", BACKEND_API_KEY="key")

    assert "BACKEND_URL is required when RECORD_STORE=remote" in str(excinfo.value)


def test_remote_store_requires_api_key() -> None:
    with pytest.raises(ValidationError) as excinfo:
        Settings(
            _env_file=None,
            RECORD_STORE="remote",
            BACKEND_URL="https://backend.example.com",
        )

    assert "BACKEND_API_KEY is required when RECORD_STORE=remote" in str(excinfo.value)


def test_backend_url_trailing_slash_is_stripped() -> None:
    settings = Settings(
        _env_file=None,
        RECORD_STORE="remote",
        BACKEND_URL="https://backend.example.com/",
        BACKEND_API_KEY="key",
    )

    assert settings.backend_base_url == "https://backend.example.com"


def test_table_names_are_validated() -> None:
    """Table names end up in request paths, so only identifiers are accepted."""

    settings = Settings(_env_file=None, CONTENT_TABLE=" videos_v2 ")
    assert settings.content_table == "videos_v2"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, FAVORITES_TABLE="favorites?select=*")


def test_fetch_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, FETCH_TIMEOUT=0)
