"""Data models for the billing core.

This package contains Pydantic models for all core entities:
- BaseDataModel: Base class with common configuration
- MoneyAmount: Non-negative, currency-tagged amount
- PaymentRecord: Payment, refund, or expense against an invoice
- TimeInterval: Raw start/stop pair
- RoundedEntry: Quarter-hour aligned billable time entry
- ValidationConfig: Reconciliation tolerance settings
- InvoiceBillingState: Derived payment state of an invoice
"""

from src.models.base import BaseDataModel
from src.models.billing import (
    DEFAULT_THRESHOLD,
    BillingStatus,
    InvoiceBillingState,
    ValidationConfig,
)
from src.models.money import MoneyAmount, quantize_money
from src.models.payment import PaymentKind, PaymentRecord
from src.models.time_entry import MINIMUM_DURATION_HOURS, RoundedEntry, TimeInterval

__all__ = [
    "BaseDataModel",
    "BillingStatus",
    "DEFAULT_THRESHOLD",
    "InvoiceBillingState",
    "MINIMUM_DURATION_HOURS",
    "MoneyAmount",
    "PaymentKind",
    "PaymentRecord",
    "RoundedEntry",
    "TimeInterval",
    "ValidationConfig",
    "quantize_money",
]
