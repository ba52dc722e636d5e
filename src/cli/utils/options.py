"""Option parsing helpers shared by CLI commands."""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from src.cli.error_handlers import ConfigurationError, DataValidationError
from src.config.settings import BillingCoreConfig, get_config
from src.models.money import MoneyAmount
from src.models.payment import PaymentKind, PaymentRecord


def load_settings() -> BillingCoreConfig:
    """Load application settings, reporting problems as configuration errors."""
    try:
        return get_config()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} problem(s) found",
            recovery_hint="Check APP_TIMEZONE, BILLING_THRESHOLD and the LOG_*"
            " settings in your environment or .env file",
        )


def parse_instant(value: str, option: str) -> dt.datetime:
    """Parse an ISO 8601 timestamp given on the command line.

    Args:
        value: Timestamp such as "2025-11-12T19:07" or "2025-11-12 19:07:30+01:00"
        option: Option name, used in the error message

    Returns:
        Parsed datetime (naive if no offset was given)

    Raises:
        DataValidationError: If the value is not an ISO 8601 timestamp
    """
    try:
        return dt.datetime.fromisoformat(value.strip())
    except ValueError:
        raise DataValidationError(
            f"{option} is not an ISO 8601 timestamp: {value!r}",
            recovery_hint="Use YYYY-MM-DDTHH:MM[:SS][+HH:MM]",
        )


def resolve_timezone(name: str) -> ZoneInfo:
    """Look up a timezone in the IANA database.

    Raises:
        DataValidationError: If the timezone is unknown
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise DataValidationError(
            f"Unknown timezone: {name}",
            recovery_hint="Use an IANA name such as Europe/Berlin",
        )


def parse_decimal(value: str, option: str) -> Decimal:
    """Parse a decimal amount given on the command line.

    Raises:
        DataValidationError: If the value is not a number
    """
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        raise DataValidationError(f"{option} is not a number: {value!r}")


def parse_payment(value: str, currency: str, default_date: dt.date) -> PaymentRecord:
    """Parse a payment given as ``AMOUNT[:KIND[:YYYY-MM-DD]]``.

    Args:
        value: Payment string, e.g. "600.00:payment:2025-11-12"
        currency: Invoice currency the amount is booked in
        default_date: Date used when the string has none

    Returns:
        PaymentRecord for the string

    Raises:
        DataValidationError: If a part of the string is malformed

    Example:
        >>> parse_payment("50:refund", "EUR", dt.date(2025, 11, 12)).signed_amount
        Decimal('-50.00')
    """
    parts = value.split(":")
    if len(parts) > 3:
        raise DataValidationError(
            f"Invalid payment {value!r}",
            recovery_hint="Use AMOUNT[:KIND[:YYYY-MM-DD]]",
        )

    amount = parse_decimal(parts[0], "--payment")
    kind = PaymentKind.PAYMENT
    if len(parts) > 1:
        try:
            kind = PaymentKind(parts[1].strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in PaymentKind)
            raise DataValidationError(
                f"Unknown payment kind {parts[1]!r}",
                recovery_hint=f"Use one of: {choices}",
            )

    payment_date = default_date
    if len(parts) > 2:
        try:
            payment_date = dt.date.fromisoformat(parts[2].strip())
        except ValueError:
            raise DataValidationError(
                f"Invalid payment date {parts[2]!r}", recovery_hint="Use YYYY-MM-DD"
            )

    return PaymentRecord(
        amount=MoneyAmount(amount=amount, currency=currency),
        kind=kind,
        payment_date=payment_date,
    )


def today_in(tz: Optional[dt.tzinfo]) -> dt.date:
    """Return the current civil date in a timezone."""
    return dt.datetime.now(tz).date()
