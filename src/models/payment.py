"""Payment data model for the billing core.

This module defines PaymentRecord, a single money movement booked
against an invoice, and PaymentKind, which decides its sign.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from src.models.base import BaseDataModel
from src.models.money import MoneyAmount


class PaymentKind(str, Enum):
    """Kind of money movement booked against an invoice.

    Amounts are always stored as positive values; the kind determines
    whether a record adds to or deducts from the total paid.
    """

    PAYMENT = "payment"
    REFUND = "refund"
    EXPENSE = "expense"

    @property
    def sign(self) -> int:
        """Return +1 for payments and -1 for refunds and expenses."""
        return 1 if self is PaymentKind.PAYMENT else -1


class PaymentRecord(BaseDataModel):
    """Represents a payment, refund, or expense booked against an invoice.

    Attributes:
        amount: Positive money amount of the movement
        kind: Payment kind (payment adds, refund/expense deduct)
        payment_date: Civil date the money moved
        payment_id: Optional identifier assigned by the persistence layer
        payment_method: Optional method (e.g., "bank_transfer")
        transaction_id: Optional external transaction reference
        notes: Optional free-text notes
        created_at: Optional creation timestamp, used to order same-day records

    Example:
        >>> record = PaymentRecord(
        ...     amount=MoneyAmount(amount="600.00", currency="EUR"),
        ...     kind=PaymentKind.PAYMENT,
        ...     payment_date=dt.date(2025, 11, 12),
        ... )
        >>> record.signed_amount
        Decimal('600.00')
    """

    amount: MoneyAmount = Field(..., description="Amount of the movement")
    kind: PaymentKind = Field(PaymentKind.PAYMENT, description="Payment kind")
    payment_date: dt.date = Field(..., description="Date the money moved")
    payment_id: Optional[str] = Field(None, description="Record identifier")
    payment_method: Optional[str] = Field(
        None, max_length=50, description="Payment method"
    )
    transaction_id: Optional[str] = Field(
        None, max_length=255, description="External transaction reference"
    )
    notes: Optional[str] = Field(None, max_length=1000, description="Notes")
    created_at: Optional[dt.datetime] = Field(None, description="Creation time")

    @field_validator("payment_date", mode="before")
    @classmethod
    def strip_time_component(cls, v):
        """Accept datetimes for payment_date and keep only the civil date."""
        if isinstance(v, dt.datetime):
            return v.date()
        return v

    @property
    def currency(self) -> str:
        """Currency code of the amount."""
        return self.amount.currency

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the payment kind."""
        return self.amount.amount * self.kind.sign
