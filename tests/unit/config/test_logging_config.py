"""Tests for centralized logging configuration."""

import json
import logging
import sys
from decimal import Decimal
from logging.handlers import RotatingFileHandler

import pytest

from src.config.logging_config import (
    LOG_FILE_BACKUPS,
    MAX_LOG_FILE_BYTES,
    JSONFormatter,
    configure_logging,
)
from src.config.settings import BillingCoreConfig
from src.utils.logging_utils import LogContext


def _settings(**values) -> BillingCoreConfig:
    """Settings from explicit values only, ignoring any .env file."""
    return BillingCoreConfig(_env_file=None, **values)


def _flush():
    for handler in logging.getLogger().handlers:
        handler.flush()


@pytest.fixture(autouse=True)
def bare_root_logger():
    """Leave the root logger without handlers after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)


class TestConfigureLogging:
    """Test installing handlers from settings."""

    def test_console_handler_configuration(self):
        """Test that a single console handler is installed at the level."""
        configure_logging(_settings(LOG_LEVEL="DEBUG"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert root.handlers[0].level == logging.DEBUG

    def test_level_from_environment(self, mock_env, monkeypatch):
        """Test that LOG_LEVEL from the environment reaches the root logger."""
        monkeypatch.setenv("LOG_LEVEL", "error")

        configure_logging(BillingCoreConfig())

        assert logging.getLogger().level == logging.ERROR

    def test_level_from_env_file(self, mock_env, monkeypatch, tmp_path):
        """Test that LOG_LEVEL written only in a .env file is honoured."""
        monkeypatch.delenv("LOG_LEVEL")
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=CRITICAL\n")

        configure_logging(BillingCoreConfig(_env_file=str(env_file)))

        assert logging.getLogger().level == logging.CRITICAL

    def test_reconfiguration_replaces_handlers(self):
        """Test that configuring twice does not duplicate handlers."""
        configure_logging(_settings())
        configure_logging(_settings(LOG_LEVEL="ERROR"))

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.ERROR

    def test_file_handler_and_level_filtering(self, tmp_path):
        """Test that LOG_FILE adds a rotating file below the level cut."""
        log_file = tmp_path / "logs" / "billing.log"
        configure_logging(_settings(LOG_LEVEL="WARNING", LOG_FILE=str(log_file)))

        file_handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == MAX_LOG_FILE_BYTES
        assert file_handlers[0].backupCount == LOG_FILE_BACKUPS

        logger = logging.getLogger("src.validators.billing_validator")
        logger.info("Reconciled invoice")
        logger.warning("Invoice INV-1 overbilled by 200.00 EUR")
        _flush()

        content = log_file.read_text()
        assert "overbilled by 200.00 EUR" in content
        assert "Reconciled invoice" not in content

    def test_json_format_includes_context(self, tmp_path):
        """Test that JSON records carry LogContext fields."""
        log_file = tmp_path / "billing.log"
        configure_logging(_settings(LOG_FORMAT="json", LOG_FILE=str(log_file)))

        with LogContext(invoice_id="INV-7"):
            logging.getLogger("billing").info("Reconciling")
        _flush()

        entry = json.loads(log_file.read_text().strip())
        assert entry["message"] == "Reconciling"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "billing"
        assert entry["invoice_id"] == "INV-7"


class TestJSONFormatter:
    """Test the JSON formatter directly."""

    def test_extra_fields_and_non_json_values(self):
        """Test that extras are included and Decimals are stringified."""
        record = logging.LogRecord(
            "billing", logging.INFO, __file__, 10, "balance %s", ("1.40",), None
        )
        record.balance = Decimal("1.40")

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "balance 1.40"
        assert entry["balance"] == "1.40"
        assert "msg" not in entry
        assert "args" not in entry

    def test_exception_is_rendered(self):
        """Test that exc_info is rendered as a traceback string."""
        try:
            raise ValueError("Amount out of range")
        except ValueError:
            logger = logging.getLogger("billing")
            record = logger.makeRecord(
                "billing", logging.ERROR, __file__, 20, "failed", (), sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: Amount out of range" in entry["exception"]
