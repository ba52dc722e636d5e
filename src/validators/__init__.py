"""Billing reconciliation and validation reporting."""

from src.validators.billing_validator import (
    BillingValidator,
    DuplicateCheckResult,
    ProposedPaymentResult,
    calculate_total_paid,
    classify_balance,
)
from src.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "BillingValidator",
    "DuplicateCheckResult",
    "ProposedPaymentResult",
    "calculate_total_paid",
    "classify_balance",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
]
