"""Logging setup for the billing core.

The engines only ever call ``logging.getLogger(__name__)``. The CLI entry
point installs handlers here once, from the resolved application settings.
"""

import json
import logging
import logging.handlers
from pathlib import Path
from typing import List

from src.config.settings import BillingCoreConfig
from src.utils.logging_utils import _ContextFilter

STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
STANDARD_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Rotate the log file at 10MB, keeping five old files
MAX_LOG_FILE_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Attributes every LogRecord has; anything else came from extra= or LogContext
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Context fields (invoice_id, correlation_id, ...) are emitted as
    top-level keys; values that JSON cannot encode, such as Decimal
    balances, are written as strings.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, STANDARD_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _build_handlers(settings: BillingCoreConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=MAX_LOG_FILE_BYTES,
                backupCount=LOG_FILE_BACKUPS,
            )
        )
    return handlers


def configure_logging(settings: BillingCoreConfig) -> None:
    """Install handlers on the root logger from application settings.

    Replaces any handlers installed earlier, so calling it twice does not
    duplicate output. Messages go to stderr and, when LOG_FILE is set, to a
    rotating log file.

    Args:
        settings: Resolved settings; LOG_LEVEL, LOG_FORMAT and LOG_FILE are
            read from it, whether they came from the environment or .env
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    level = getattr(logging, settings.log_level)
    root_logger.setLevel(level)

    if settings.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=STANDARD_DATEFMT)

    context_filter = _ContextFilter()
    for handler in _build_handlers(settings):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
