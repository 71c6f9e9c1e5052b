"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from swimcoach.config import Environment, LogFormat, Settings, get_settings


def test_defaults():
    settings = get_settings()

    assert settings.entries_encoding == "utf-8-sig"
    assert settings.entries_delimiter == ","
    assert settings.storage_retry_attempts == 3
    assert settings.log_format == LogFormat.CONSOLE


def test_secret_key_hidden():
    settings = get_settings()

    assert "test-key" not in repr(settings)
    assert settings.supabase_key.get_secret_value()


def test_environment_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings()

    assert settings.environment == Environment.PRODUCTION
    assert settings.is_production


def test_retry_attempts_must_be_positive(monkeypatch):
    monkeypatch.setenv("STORAGE_RETRY_ATTEMPTS", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_delimiter_single_character(monkeypatch):
    monkeypatch.setenv("ENTRIES_DELIMITER", ";;")

    with pytest.raises(ValidationError):
        Settings()


def test_settings_cached():
    assert get_settings() is get_settings()
