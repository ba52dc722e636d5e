"""Money data model for the billing core.

This module defines MoneyAmount, a non-negative currency-tagged amount
with two fractional digits. All reconciliation arithmetic happens on
these values, never on floats.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from pydantic import ConfigDict, Field, field_validator

from src.models.base import BaseDataModel

CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round a decimal to two fractional digits (ROUND_HALF_UP).

    Raises:
        ValueError: If the value is not finite or has too many digits to
            be represented in cents

    Example:
        >>> quantize_money(Decimal("10.005"))
        Decimal('10.01')
    """
    try:
        result = value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value}")
    # Collapse negative zero so balances never print as "-0.00"
    if not result:
        return Decimal("0.00")
    return result


class MoneyAmount(BaseDataModel):
    """A non-negative amount of money in a single currency.

    Attributes:
        amount: Non-negative amount, quantized to 2 decimal places
        currency: ISO 4217 currency code (e.g., "EUR")

    Example:
        >>> price = MoneyAmount(amount="1000", currency="eur")
        >>> price.amount, price.currency
        (Decimal('1000.00'), 'EUR')
        >>> str(price)
        '1000.00 EUR'
    """

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Non-negative amount")
    currency: str = Field("EUR", description="ISO 4217 currency code")

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to Decimal and round to cents.

        Args:
            v: The value to convert

        Returns:
            The value as a Decimal with two fractional digits

        Raises:
            ValueError: If the value cannot be converted to Decimal
        """
        if isinstance(v, bool):
            raise ValueError(f"Cannot convert {v!r} to Decimal")
        if not isinstance(v, Decimal):
            try:
                v = Decimal(str(v))
            except (ValueError, TypeError, ArithmeticError) as e:
                raise ValueError(f"Cannot convert {v!r} to Decimal: {e}")
        if not v.is_finite():
            raise ValueError(f"Amount must be a finite number, got {v}")
        return quantize_money(v)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Normalize and validate the currency code.

        Raises:
            ValueError: If the code is not three letters
        """
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"currency must be a 3-letter ISO 4217 code, got {v!r}")
        return code

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
