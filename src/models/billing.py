"""Billing reconciliation data models.

This module defines the configuration and result types of the billing
reconciliation engine:
- BillingStatus: valid, underbilled, or overbilled
- ValidationConfig: per-call tolerance and strictness
- InvoiceBillingState: derived payment state of an invoice
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from src.models.base import BaseDataModel
from src.models.money import quantize_money

DEFAULT_THRESHOLD = Decimal("1.50")


class BillingStatus(str, Enum):
    """Payment state of an invoice relative to its total."""

    VALID = "valid"
    UNDERBILLED = "underbilled"
    OVERBILLED = "overbilled"


class ValidationConfig(BaseDataModel):
    """Tolerance settings for a single reconciliation call.

    Attributes:
        threshold_amount: Acceptable absolute balance, in invoice currency units
        strict_mode: Reject proposed payments that would overbill the invoice

    Example:
        >>> ValidationConfig().threshold_amount
        Decimal('1.50')
        >>> ValidationConfig(threshold_amount=5, strict_mode=True).strict_mode
        True
    """

    model_config = ConfigDict(frozen=True)

    threshold_amount: Decimal = Field(
        DEFAULT_THRESHOLD, ge=0, description="Acceptable balance variance"
    )
    strict_mode: bool = Field(False, description="Reject overbilling payments")

    @field_validator("threshold_amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert the threshold to a Decimal with two decimal places.

        Raises:
            ValueError: If the value is not a finite number or is finer
                than a cent
        """
        if isinstance(v, bool):
            raise ValueError(f"Cannot convert {v!r} to Decimal")
        if not isinstance(v, Decimal):
            try:
                v = Decimal(str(v))
            except (ValueError, TypeError, ArithmeticError) as e:
                raise ValueError(f"Cannot convert {v!r} to Decimal: {e}")
        if not v.is_finite():
            raise ValueError(f"Threshold must be a finite number, got {v}")
        quantized = quantize_money(v)
        if quantized != v:
            raise ValueError(f"Threshold must be a whole number of cents, got {v}")
        return quantized


class InvoiceBillingState(BaseDataModel):
    """Derived payment state of an invoice.

    Computed fresh on every reconciliation call and never persisted by
    the engine itself.

    Attributes:
        invoice_id: Optional identifier of the reconciled invoice
        invoice_total: Invoice total
        total_paid: Payments minus refunds and expenses
        balance: invoice_total - total_paid (negative when overpaid)
        status: Classification against the threshold
        warnings: Human-readable warnings, in the order they were raised
        threshold: Threshold the classification used
        currency: Invoice currency code
        has_duplicates: Whether the duplicate check flagged payments
        duplicate_count: Number of suspected duplicate records
    """

    model_config = ConfigDict(frozen=True)

    invoice_id: Optional[str] = None
    invoice_total: Decimal
    total_paid: Decimal
    balance: Decimal
    status: BillingStatus
    warnings: List[str] = Field(default_factory=list)
    threshold: Decimal
    currency: str
    has_duplicates: bool = False
    duplicate_count: int = Field(0, ge=0)

    @property
    def is_settled(self) -> bool:
        """True when the invoice is paid to the cent."""
        return self.balance == 0

