"""Tests for configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from app.config import Settings, get_settings


@pytest.fixture(autouse=True)
def no_env_file():
    """Keep a developer's .env file out of these tests."""
    original_config = Settings.model_config
    Settings.model_config = SettingsConfigDict(env_prefix="HV_", extra="ignore")
    yield
    Settings.model_config = original_config


def test_settings_defaults():
    """Test that settings use sensible defaults."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings()

        assert settings.feed_url.startswith("https://news.google.com/rss")
        assert "Mozilla/5.0" in settings.feed_user_agent
        assert settings.feed_ttl_seconds == 300
        assert settings.max_headlines == 6
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.ffmpeg_binary == "ffmpeg"
        assert settings.display_locale == "hi_IN"
        assert settings.display_timezone == "Asia/Kolkata"
        assert settings.download_filename == "aaj-ki-headlines.mp4"
        assert settings.env == "dev"


def test_settings_env_override():
    """Test that environment variables override defaults."""
    with patch.dict(
        os.environ,
        {
            "HV_FEED_URL": "https://example.com/rss.xml",
            "HV_FEED_TTL_SECONDS": "60",
            "HV_MAX_HEADLINES": "3",
            "HV_SCRATCH_DIR": "/tmp/hv-scratch",
            "HV_ENV": "prod",
        },
        clear=True,
    ):
        settings = Settings()

        assert settings.feed_url == "https://example.com/rss.xml"
        assert settings.feed_ttl_seconds == 60
        assert settings.max_headlines == 3
        assert settings.scratch_dir == "/tmp/hv-scratch"
        assert settings.env == "prod"


def test_settings_rejects_unknown_env():
    """Test that env is restricted to dev or prod."""
    with patch.dict(os.environ, {"HV_ENV": "staging"}, clear=True):
        with pytest.raises(ValidationError) as exc_info:
            Settings()

        error_fields = {e["loc"][0] for e in exc_info.value.errors()}
        assert "env" in error_fields


def test_settings_rejects_zero_headlines():
    """Test that at least one headline must be kept."""
    with patch.dict(os.environ, {"HV_MAX_HEADLINES": "0"}, clear=True):
        with pytest.raises(ValidationError):
            Settings()


def test_get_settings_singleton():
    """Test that get_settings returns the same instance."""
    with patch.dict(os.environ, {}, clear=True):
        # Clear the singleton
        import app.config

        app.config._settings = None

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        app.config._settings = None
