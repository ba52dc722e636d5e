"""
Unit tests for configuration management.
"""

import os
from decimal import Decimal
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from src.config.settings import (
    BillingCoreConfig,
    get_config,
    load_config,
    reload_config,
)


class TestBillingCoreConfig:
    """Test cases for BillingCoreConfig."""

    def test_config_with_valid_env_vars(self, test_config):
        """Test configuration loads correctly with valid environment variables."""
        assert test_config.app_timezone == "Europe/Berlin"
        assert test_config.billing_threshold == Decimal("1.50")
        assert test_config.billing_strict_mode is False
        assert test_config.default_currency == "EUR"
        assert test_config.environment == "testing"
        assert test_config.debug is True
        assert test_config.log_level == "DEBUG"

    def test_default_values(self):
        """Test default configuration values without any environment."""
        with patch.dict(os.environ, {}, clear=True):
            config = BillingCoreConfig(_env_file=None)

        assert config.app_timezone == "Europe/Berlin"
        assert config.billing_threshold == Decimal("1.50")
        assert config.billing_strict_mode is False
        assert config.environment == "development"
        assert config.log_level == "INFO"

    def test_env_overrides(self, mock_env, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("APP_TIMEZONE", "America/New_York")
        monkeypatch.setenv("BILLING_THRESHOLD", "0.50")
        monkeypatch.setenv("BILLING_STRICT_MODE", "true")
        monkeypatch.setenv("DEFAULT_CURRENCY", "usd")

        config = BillingCoreConfig()

        assert config.app_timezone == "America/New_York"
        assert config.billing_threshold == Decimal("0.50")
        assert config.billing_strict_mode is True
        assert config.default_currency == "USD"

    def test_unknown_timezone(self, mock_env, monkeypatch):
        """Test that a timezone missing from the IANA database is rejected."""
        monkeypatch.setenv("APP_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ValidationError, match="Unknown timezone"):
            BillingCoreConfig()

    def test_negative_threshold(self, mock_env, monkeypatch):
        """Test that a negative threshold is rejected."""
        monkeypatch.setenv("BILLING_THRESHOLD", "-1")

        with pytest.raises(ValidationError):
            BillingCoreConfig()

    def test_invalid_currency(self, mock_env, monkeypatch):
        """Test that a malformed currency code is rejected."""
        monkeypatch.setenv("DEFAULT_CURRENCY", "EURO")

        with pytest.raises(ValidationError, match="3-letter"):
            BillingCoreConfig()

    def test_log_level_validation(self, mock_env, monkeypatch):
        """Test log level validation and normalization."""
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert BillingCoreConfig().log_level == "WARNING"

        monkeypatch.setenv("LOG_LEVEL", "INVALID")
        with pytest.raises(ValidationError):
            BillingCoreConfig()

    def test_log_format_validation(self, mock_env, monkeypatch):
        """Test log format validation and normalization."""
        assert BillingCoreConfig().log_format == "standard"

        monkeypatch.setenv("LOG_FORMAT", "JSON")
        assert BillingCoreConfig().log_format == "json"

        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValidationError, match="Log format"):
            BillingCoreConfig()

    def test_log_file_setting(self, mock_env, monkeypatch):
        """Test that LOG_FILE is optional and read from the environment."""
        assert BillingCoreConfig().log_file is None

        monkeypatch.setenv("LOG_FILE", "logs/billing.log")
        assert BillingCoreConfig().log_file == "logs/billing.log"

    def test_environment_validation(self, mock_env, monkeypatch):
        """Test environment validation."""
        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert BillingCoreConfig().environment == "production"

        monkeypatch.setenv("ENVIRONMENT", "staging")
        with pytest.raises(ValidationError):
            BillingCoreConfig()

    def test_get_timezone(self, test_config):
        """Test resolving the configured timezone."""
        assert test_config.get_timezone() == ZoneInfo("Europe/Berlin")

    def test_to_validation_config_defaults(self, test_config):
        """Test building a ValidationConfig from settings."""
        config = test_config.to_validation_config()

        assert config.threshold_amount == Decimal("1.50")
        assert config.strict_mode is False

    def test_to_validation_config_overrides(self, test_config):
        """Test that explicit values win over settings."""
        config = test_config.to_validation_config(
            threshold=Decimal("0"), strict_mode=True
        )

        assert config.threshold_amount == Decimal("0.00")
        assert config.strict_mode is True


class TestConfigFunctions:
    """Test cases for configuration functions."""

    def test_get_config_singleton(self, mock_env):
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()

        assert config1 is config2

    def test_reload_config(self, mock_env):
        """Test configuration reload creates a new instance."""
        config1 = get_config()
        config2 = reload_config()

        assert config1 is not config2
        assert get_config() is config2

    def test_load_config_with_env_file(self, mock_env, monkeypatch, tmp_path):
        """Test loading configuration from a custom .env file."""
        monkeypatch.delenv("APP_TIMEZONE")
        env_file = tmp_path / "test.env"
        env_file.write_text("APP_TIMEZONE=Asia/Tokyo\n")

        config = load_config(str(env_file))

        assert config.app_timezone == "Asia/Tokyo"
