"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import os
from decimal import Decimal
from typing import Dict
from zoneinfo import ZoneInfo

import pytest

from src.config import BillingCoreConfig, reload_config
from src.models import MoneyAmount, PaymentKind, PaymentRecord

# Variables read by BillingCoreConfig
_SETTINGS_VARS = (
    "APP_TIMEZONE",
    "BILLING_THRESHOLD",
    "BILLING_STRICT_MODE",
    "DEFAULT_CURRENCY",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'APP_TIMEZONE': 'Europe/Berlin',
        'BILLING_THRESHOLD': '1.50',
        'BILLING_STRICT_MODE': 'false',
        'DEFAULT_CURRENCY': 'EUR',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key in _SETTINGS_VARS:
        monkeypatch.delenv(key, raising=False)
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import src.config.settings
    src.config.settings._config = None

    yield test_env_vars

    # Clean up
    src.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> BillingCoreConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def berlin_tz() -> ZoneInfo:
    """Civil timezone used by most rounding tests."""
    return ZoneInfo("Europe/Berlin")


@pytest.fixture
def make_payment():
    """Factory for payment records in EUR."""

    def _make_payment(
        amount,
        kind: PaymentKind = PaymentKind.PAYMENT,
        payment_date: dt.date = dt.date(2025, 11, 12),
        currency: str = "EUR",
        **kwargs,
    ) -> PaymentRecord:
        return PaymentRecord(
            amount=MoneyAmount(amount=Decimal(str(amount)), currency=currency),
            kind=kind,
            payment_date=payment_date,
            **kwargs,
        )

    return _make_payment


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
