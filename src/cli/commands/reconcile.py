"""Reconcile invoice command."""

from typing import Optional, Tuple

import click

from src.cli.error_handlers import PaymentRejectedError, with_error_handling
from src.cli.utils.formatters import (
    format_info,
    format_issue,
    format_money,
    format_status,
    format_success,
    format_table,
)
from src.cli.utils.options import (
    load_settings,
    parse_decimal,
    parse_payment,
    resolve_timezone,
    today_in,
)
from src.models.billing import BillingStatus
from src.models.money import MoneyAmount
from src.utils.logging_utils import LogContext, generate_correlation_id
from src.validators.billing_validator import BillingValidator


@click.command(name="reconcile")
@click.option("--total", "total", required=True, help="Invoice total, e.g. 1000.00")
@click.option(
    "--currency",
    type=str,
    default=None,
    help="Invoice currency (default: DEFAULT_CURRENCY setting)",
)
@click.option(
    "--payment",
    "payments",
    multiple=True,
    help="Booked record as AMOUNT[:KIND[:YYYY-MM-DD]]; KIND is payment, "
    "refund or expense (repeatable)",
)
@click.option(
    "--threshold",
    type=str,
    default=None,
    help="Acceptable balance variance (default: BILLING_THRESHOLD setting)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject proposed payments that would overbill the invoice",
)
@click.option(
    "--proposed",
    type=str,
    default=None,
    help="Check a payment that is not booked yet",
)
@click.option("--invoice-id", type=str, default=None, help="Invoice identifier")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def reconcile(
    total: str,
    currency: Optional[str],
    payments: Tuple[str, ...],
    threshold: Optional[str],
    strict: Optional[bool],
    proposed: Optional[str],
    invoice_id: Optional[str],
    debug: bool,
):
    """Reconcile an invoice total against its payments.

    Prints the billing status, balance and warnings. With --proposed, also
    projects the effect of a new payment; in strict mode a payment that
    would overbill the invoice is rejected with exit code 4.

    Example:
        billing-core reconcile --total 1000 --payment 600:payment:2025-11-12 \\
            --payment 600:payment:2025-11-12
        billing-core reconcile --total 500 --payment 400 --proposed 150 --strict
    """
    with with_error_handling(debug):
        settings = load_settings()
        config = settings.to_validation_config(
            threshold=parse_decimal(threshold, "--threshold") if threshold else None,
            strict_mode=strict,
        )
        invoice_currency = currency or settings.default_currency
        invoice_total = MoneyAmount(
            amount=parse_decimal(total, "--total"), currency=invoice_currency
        )
        today = today_in(resolve_timezone(settings.app_timezone))
        records = [
            parse_payment(p, invoice_total.currency, today) for p in payments
        ]

        validator = BillingValidator(default_config=config)
        with LogContext(correlation_id=generate_correlation_id()):
            state = validator.validate_invoice(
                invoice_total, records, invoice_id=invoice_id
            )

            click.echo(format_info(f"Reconciling invoice of {invoice_total}..."))
            click.echo()
            click.echo(
                format_table(
                    ["Invoice total", "Total paid", "Balance", "Threshold"],
                    [
                        [
                            format_money(state.invoice_total, state.currency),
                            format_money(state.total_paid, state.currency),
                            format_money(state.balance, state.currency),
                            format_money(state.threshold, state.currency),
                        ]
                    ],
                )
            )
            click.echo()
            click.echo(f"Status: {format_status(state.status)}")
            for issue in validator.build_report(state).issues:
                click.echo(format_issue(issue))

            if proposed is None:
                if state.status is BillingStatus.VALID:
                    click.echo(format_success("Invoice is reconciled"))
                return

            result = validator.validate_proposed_payment(
                invoice_total,
                records,
                parse_decimal(proposed, "--proposed"),
                invoice_id=invoice_id,
            )

        click.echo()
        click.echo(
            f"Projected balance: "
            f"{format_money(result.projected_balance, state.currency)} "
            f"({format_status(result.projected_status)})"
        )
        for issue in validator.build_proposal_report(result).issues:
            click.echo(format_issue(issue))

        if not result.is_valid:
            raise PaymentRejectedError(
                "Payment would overbill the invoice",
                recovery_hint="Reduce the amount or record it without --strict",
            )
        click.echo(format_success("Payment can be recorded"))
