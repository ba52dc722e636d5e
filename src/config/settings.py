"""
Configuration management for the billing core.

The rounding and reconciliation engines never read this module; the CLI
resolves settings here and passes a timezone and a ValidationConfig to
every engine call explicitly.
"""

from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.billing import DEFAULT_THRESHOLD, ValidationConfig


class BillingCoreConfig(BaseSettings):
    """Configuration settings for the billing core."""

    # Civil timezone for wall-clock rounding
    app_timezone: str = Field(default="Europe/Berlin", alias="APP_TIMEZONE")

    # Reconciliation defaults
    billing_threshold: Decimal = Field(
        default=DEFAULT_THRESHOLD, ge=0, alias="BILLING_THRESHOLD"
    )
    billing_strict_mode: bool = Field(default=False, alias="BILLING_STRICT_MODE")
    default_currency: str = Field(default="EUR", alias="DEFAULT_CURRENCY")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="standard", alias="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("app_timezone")
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the timezone exists in the IANA database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v):
        """Ensure the currency is a 3-letter ISO 4217 code."""
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Currency must be a 3-letter ISO 4217 code: {v}")
        return code

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is one the logging setup understands."""
        valid_formats = ["standard", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    def get_timezone(self) -> ZoneInfo:
        """Get the configured civil timezone."""
        return ZoneInfo(self.app_timezone)

    def to_validation_config(
        self,
        threshold: Optional[Decimal] = None,
        strict_mode: Optional[bool] = None,
    ) -> ValidationConfig:
        """Build a ValidationConfig, letting explicit values win over settings."""
        return ValidationConfig(
            threshold_amount=(
                threshold if threshold is not None else self.billing_threshold
            ),
            strict_mode=(
                strict_mode if strict_mode is not None else self.billing_strict_mode
            ),
        )


def load_config(env_file: Optional[str] = None) -> BillingCoreConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return BillingCoreConfig()


# Global configuration instance
_config: Optional[BillingCoreConfig] = None


def get_config() -> BillingCoreConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> BillingCoreConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
