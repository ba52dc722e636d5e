"""Billing reconciliation engine.

This module classifies the payment state of an invoice from its total and
the payment records booked against it:
- Folding payments, refunds and expenses into a signed total paid
- Classifying the balance as valid, underbilled or overbilled against a
  configurable tolerance
- Flagging likely duplicate payments on overbilled invoices
- Projecting the effect of a proposed payment, optionally rejecting it

The engine never reads or writes storage. Callers hand it a materialized
list of records and persist whatever state they derive from the result;
reading payments and writing the status must happen under a per-invoice
lock or transaction on the caller's side.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Union

from src.exceptions import PreconditionError
from src.models.billing import BillingStatus, InvoiceBillingState, ValidationConfig
from src.models.money import MoneyAmount, quantize_money
from src.models.payment import PaymentRecord
from src.utils.logging_utils import LogContext, log_function_call
from src.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)


@dataclass
class DuplicateCheckResult:
    """Result of the duplicate payment heuristic.

    Attributes:
        has_duplicates: True if any (amount, date) pair occurs more than once
        duplicate_count: Sum of (occurrences - 1) over all such pairs
    """

    has_duplicates: bool
    duplicate_count: int


@dataclass
class ProposedPaymentResult:
    """Projected effect of recording a payment that is not booked yet.

    Attributes:
        is_valid: False only in strict mode when the payment would overbill
        warnings: Warnings about the projected state
        projected_balance: Balance after the payment would be recorded
        projected_status: Classification of the projected balance
        current_state: Billing state before the proposed payment
    """

    is_valid: bool
    warnings: List[str]
    projected_balance: Decimal
    projected_status: BillingStatus
    current_state: Optional[InvoiceBillingState] = field(default=None, repr=False)


def classify_balance(balance: Decimal, threshold: Decimal) -> BillingStatus:
    """Classify a signed balance against a tolerance.

    A balance exactly at the threshold (in either direction) is valid.

    Args:
        balance: invoice total minus total paid
        threshold: Non-negative tolerance in the invoice currency

    Returns:
        BillingStatus for the balance

    Example:
        >>> classify_balance(Decimal("1.50"), Decimal("1.50"))
        <BillingStatus.VALID: 'valid'>
        >>> classify_balance(Decimal("1.51"), Decimal("1.50"))
        <BillingStatus.UNDERBILLED: 'underbilled'>
        >>> classify_balance(Decimal("-1.51"), Decimal("1.50"))
        <BillingStatus.OVERBILLED: 'overbilled'>
    """
    if balance > threshold:
        return BillingStatus.UNDERBILLED
    if balance < -threshold:
        return BillingStatus.OVERBILLED
    return BillingStatus.VALID


def calculate_total_paid(payments: Iterable[PaymentRecord]) -> Decimal:
    """Sum payments minus refunds and expenses.

    Example:
        >>> calculate_total_paid([])
        Decimal('0.00')
    """
    total = sum((p.signed_amount for p in payments), Decimal("0"))
    return quantize_money(total)


class BillingValidator:
    """Validates invoice billing status against recorded payments.

    The validator holds no state besides an immutable default
    configuration; every method may receive its own ValidationConfig.

    Example:
        >>> validator = BillingValidator()
        >>> state = validator.validate_invoice(
        ...     MoneyAmount(amount="500.00", currency="EUR"), []
        ... )
        >>> state.status
        <BillingStatus.UNDERBILLED: 'underbilled'>
    """

    def __init__(self, default_config: Optional[ValidationConfig] = None) -> None:
        """Initialize the validator.

        Args:
            default_config: Configuration used when a call passes none
                (defaults to a 1.50 threshold, non-strict)
        """
        self.default_config = default_config or ValidationConfig()

    @log_function_call
    def validate_invoice(
        self,
        invoice_total: MoneyAmount,
        payments: Sequence[PaymentRecord],
        config: Optional[ValidationConfig] = None,
        invoice_id: Optional[str] = None,
    ) -> InvoiceBillingState:
        """Validate the billing status of an invoice.

        Args:
            invoice_total: Total amount of the invoice
            payments: All payment, refund and expense records of the invoice
            config: Optional per-call configuration
            invoice_id: Optional invoice identifier, carried into the result

        Returns:
            InvoiceBillingState with balance, status and warnings

        Raises:
            PreconditionError: If a record's currency differs from the invoice
        """
        payments = list(payments)
        config = config or self.default_config
        currency = invoice_total.currency
        self._check_currencies(currency, payments)

        with LogContext(invoice_id=invoice_id):
            threshold = config.threshold_amount
            total = invoice_total.amount
            total_paid = calculate_total_paid(payments)
            balance = quantize_money(total - total_paid)
            status = classify_balance(balance, threshold)

            warnings: List[str] = []
            duplicates = DuplicateCheckResult(has_duplicates=False, duplicate_count=0)

            if status is BillingStatus.UNDERBILLED:
                warnings.append(
                    f"Invoice is underbilled by {abs(balance):.2f} {currency}. "
                    f"Expected: {total:.2f} {currency}, "
                    f"Paid: {total_paid:.2f} {currency}."
                )
            elif status is BillingStatus.OVERBILLED:
                warnings.append(
                    f"Invoice is overbilled by {abs(balance):.2f} {currency}. "
                    f"Expected: {total:.2f} {currency}, "
                    f"Paid: {total_paid:.2f} {currency}. "
                    "Overpayment may indicate duplicate payment entries."
                )
                duplicates = self.check_duplicate_payments(payments)
                if duplicates.has_duplicates:
                    warnings.append(
                        "Potential duplicate payments detected: "
                        f"{duplicates.duplicate_count} payment(s) with identical "
                        "amounts on the same date."
                    )
                logger.warning(
                    f"Invoice {invoice_id or '<unsaved>'} overbilled by "
                    f"{abs(balance):.2f} {currency}"
                )
            elif balance != 0:
                warnings.append(
                    f"Balance is {balance:.2f} {currency} "
                    f"(within acceptable threshold of {threshold:.2f} {currency})."
                )

            logger.debug(
                f"Reconciled invoice: total={total} paid={total_paid} "
                f"balance={balance} status={status.value}"
            )

        return InvoiceBillingState(
            invoice_id=invoice_id,
            invoice_total=total,
            total_paid=total_paid,
            balance=balance,
            status=status,
            warnings=warnings,
            threshold=threshold,
            currency=currency,
            has_duplicates=duplicates.has_duplicates,
            duplicate_count=duplicates.duplicate_count,
        )

    @staticmethod
    def check_duplicate_payments(
        payments: Iterable[PaymentRecord],
    ) -> DuplicateCheckResult:
        """Find records with identical amounts on the same date.

        Identical amount and date is treated as suspicious whatever the
        record kinds or references are. The heuristic over-reports on
        purpose; a false positive only costs a review.

        Args:
            payments: Records to inspect

        Returns:
            DuplicateCheckResult with flag and count
        """
        groups = Counter((p.amount.amount, p.payment_date) for p in payments)
        repeated = [count for count in groups.values() if count > 1]
        return DuplicateCheckResult(
            has_duplicates=bool(repeated),
            duplicate_count=sum(count - 1 for count in repeated),
        )

    @log_function_call
    def validate_proposed_payment(
        self,
        invoice_total: MoneyAmount,
        existing_payments: Sequence[PaymentRecord],
        proposed_amount: Union[MoneyAmount, Decimal, str, int, float],
        config: Optional[ValidationConfig] = None,
        invoice_id: Optional[str] = None,
    ) -> ProposedPaymentResult:
        """Check a payment before it is recorded.

        The projection is not checked for duplicates; duplicates are only
        evaluated against committed records.

        Args:
            invoice_total: Total amount of the invoice
            existing_payments: Records already booked against the invoice
            proposed_amount: Amount of the payment about to be recorded;
                plain numbers are taken to be in the invoice currency
            config: Optional per-call configuration
            invoice_id: Optional invoice identifier

        Returns:
            ProposedPaymentResult; is_valid is always True unless strict
            mode is on and the payment would overbill the invoice

        Raises:
            PreconditionError: If a currency differs from the invoice
            pydantic.ValidationError: If proposed_amount is negative
        """
        config = config or self.default_config
        currency = invoice_total.currency
        if not isinstance(proposed_amount, MoneyAmount):
            proposed_amount = MoneyAmount(amount=proposed_amount, currency=currency)
        if proposed_amount.currency != currency:
            raise PreconditionError(
                f"Proposed payment currency {proposed_amount.currency} does not "
                f"match invoice currency {currency}",
                field="proposed_amount",
                value=proposed_amount,
            )

        current = self.validate_invoice(
            invoice_total, existing_payments, config=config, invoice_id=invoice_id
        )
        amount = proposed_amount.amount
        projected_balance = quantize_money(
            current.invoice_total - (current.total_paid + amount)
        )
        projected_status = classify_balance(projected_balance, config.threshold_amount)

        warnings: List[str] = []
        if projected_status is BillingStatus.UNDERBILLED:
            warnings.append(
                "After this payment, invoice will still be underbilled by "
                f"{abs(projected_balance):.2f} {currency}."
            )
        elif projected_status is BillingStatus.OVERBILLED:
            warnings.append(
                f"This payment of {amount:.2f} {currency} would cause overbilling "
                f"by {abs(projected_balance):.2f} {currency}. "
                f"Remaining balance is only {current.balance:.2f} {currency}."
            )

        is_valid = not (
            config.strict_mode and projected_status is BillingStatus.OVERBILLED
        )
        if not is_valid:
            logger.warning(
                f"Rejected payment of {amount:.2f} {currency} for invoice "
                f"{invoice_id or '<unsaved>'} in strict mode"
            )

        return ProposedPaymentResult(
            is_valid=is_valid,
            warnings=warnings,
            projected_balance=projected_balance,
            projected_status=projected_status,
            current_state=current,
        )

    @staticmethod
    def get_payment_breakdown(
        payments: Iterable[PaymentRecord],
    ) -> List[PaymentRecord]:
        """Order records by payment date, then creation time.

        Records without a creation time sort before timed records of the
        same day; the original order is kept among equal keys.

        Args:
            payments: Records of one invoice

        Returns:
            New list of records in chronological order
        """
        return sorted(
            payments,
            key=lambda p: (
                p.payment_date,
                p.created_at is not None,
                p.created_at.timestamp() if p.created_at else 0.0,
            ),
        )

    @staticmethod
    def build_report(state: InvoiceBillingState) -> ValidationReport:
        """Render a billing state into a ValidationReport.

        Within-tolerance disclosures become INFO messages; underbilling,
        overbilling and duplicate warnings become WARNING issues.

        Args:
            state: Result of validate_invoice

        Returns:
            ValidationReport describing the billing state
        """
        report = ValidationReport()
        context = {"invoice_id": state.invoice_id} if state.invoice_id else None
        if state.status is BillingStatus.VALID:
            for message in state.warnings:
                report.add_info("balance", message, state.balance, context)
            return report

        report.add_warning("balance", state.warnings[0], state.balance, context)
        for message in state.warnings[1:]:
            report.add_warning("payments", message, state.duplicate_count, context)
        return report

    @staticmethod
    def build_proposal_report(result: ProposedPaymentResult) -> ValidationReport:
        """Render a proposed payment check into a ValidationReport.

        A rejected proposal is an ERROR; other projection warnings are
        WARNING issues.
        """
        report = ValidationReport()
        for message in result.warnings:
            if result.is_valid:
                report.add_warning(
                    "proposed_amount", message, result.projected_balance
                )
            else:
                report.add_error("proposed_amount", message, result.projected_balance)
        return report

    @staticmethod
    def _check_currencies(currency: str, payments: Iterable[PaymentRecord]) -> None:
        for index, payment in enumerate(payments):
            if payment.currency != currency:
                raise PreconditionError(
                    f"Payment #{index + 1} is in {payment.currency}, "
                    f"invoice is in {currency}",
                    field="payments",
                    value=payment,
                )
