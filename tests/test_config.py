"""Tests for configuration settings."""

import pytest

from repo_stars.config import EnrichmentConfig, Settings, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self):
        """Test default values are correct."""
        settings = Settings(_env_file=None)

        assert settings.github_token == ""
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.enrichment.stagger_interval_ms == 6000
        assert settings.enrichment.fetch_timeout_seconds is None
        assert settings.logging.log_file is None

    def test_settings_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("GITHUB_TOKEN", "test_token_123")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("ENRICHMENT__STAGGER_INTERVAL_MS", "1500")
        monkeypatch.setenv("ENRICHMENT__FETCH_TIMEOUT_SECONDS", "2.5")

        settings = Settings(_env_file=None)

        assert settings.github_token == "test_token_123"
        assert settings.log_level == "DEBUG"
        assert settings.enrichment.stagger_interval_ms == 1500
        assert settings.enrichment.fetch_timeout_seconds == 2.5

    def test_settings_log_level_validation(self, monkeypatch):
        """Test that invalid log level is rejected."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_get_settings_cached(self):
        """get_settings returns the same instance."""
        assert get_settings() is get_settings()


class TestEnrichmentConfig:
    """Tests for EnrichmentConfig."""

    def test_interval_in_seconds(self):
        config = EnrichmentConfig(stagger_interval_ms=6000)
        assert config.stagger_interval == 6.0

    def test_zero_interval_allowed(self):
        assert EnrichmentConfig(stagger_interval_ms=0).stagger_interval == 0.0

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            EnrichmentConfig(stagger_interval_ms=-1)

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError):
            EnrichmentConfig(fetch_timeout_seconds=0)
