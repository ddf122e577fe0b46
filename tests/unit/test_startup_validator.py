"""Unit tests for startup configuration validation."""

import pytest

from shared.config import get_settings
from shared.startup_validator import StartupValidationError, validate_startup_config


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are lru_cached; reload them around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestValidateStartupConfig:
    def test_valid_connection(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "mongodb://localhost:27017/seed")

        settings = validate_startup_config()

        assert settings.DB_CONNECTION == "mongodb://localhost:27017/seed"
        assert settings.API_PORT == 3000
        assert settings.SEED_STRICT_PAST_DATES is False

    def test_srv_connection_accepted(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "mongodb+srv://user:pw@cluster0.example.net/seed")

        assert validate_startup_config().DB_CONNECTION.startswith("mongodb+srv://")

    def test_missing_connection_is_fatal(self, monkeypatch):
        monkeypatch.delenv("DB_CONNECTION", raising=False)
        monkeypatch.chdir("/")  # no .env file to fall back on

        with pytest.raises(StartupValidationError, match="DB_CONNECTION"):
            validate_startup_config()

    def test_empty_connection_rejected(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "   ")

        with pytest.raises(StartupValidationError, match="empty"):
            validate_startup_config()

    def test_wrong_scheme_rejected(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "postgresql://localhost/seed")

        with pytest.raises(StartupValidationError, match="mongodb://"):
            validate_startup_config()

    def test_invalid_value_reported(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "mongodb://localhost")
        monkeypatch.setenv("API_PORT", "not-a-port")

        with pytest.raises(StartupValidationError, match="Invalid configuration"):
            validate_startup_config()

    def test_seed_settings_parsed(self, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION", "mongodb://localhost")
        monkeypatch.setenv("SEED_RANDOM_SEED", "42")
        monkeypatch.setenv("SEED_STRICT_PAST_DATES", "true")

        settings = validate_startup_config()

        assert settings.SEED_RANDOM_SEED == 42
        assert settings.SEED_STRICT_PAST_DATES is True
