"""Exceptions raised by the rounding and reconciliation engines.

Both engines are pure computations, so the only failure mode is input that
breaks a precondition. Callers translate these into user-facing responses.
"""

from typing import Any, Optional


class BillingCoreError(Exception):
    """Base class for all errors raised by the billing core."""


class PreconditionError(BillingCoreError, ValueError):
    """Raised when a caller passes input that violates a precondition.

    Examples are a timer that stops before it starts, or a payment booked
    in a different currency than its invoice.

    Attributes:
        message: Human-readable description of the violation
        field: Name of the offending argument or field, if known
        value: The offending value, if known
    """

    def __init__(
        self, message: str, field: Optional[str] = None, value: Any = None
    ) -> None:
        self.message = message
        self.field = field
        self.value = value
        super().__init__(message)
