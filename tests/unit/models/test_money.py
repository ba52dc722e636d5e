"""Unit tests for the MoneyAmount model."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.models.money import MoneyAmount, quantize_money


class TestQuantizeMoney:
    """Test cent rounding."""

    def test_rounds_half_up(self):
        """Test that half a cent rounds away from zero."""
        assert quantize_money(Decimal("10.005")) == Decimal("10.01")
        assert quantize_money(Decimal("10.004")) == Decimal("10.00")
        assert quantize_money(Decimal("-10.005")) == Decimal("-10.01")

    def test_out_of_range_raises_value_error(self):
        """Test that values needing more than the context precision fail cleanly."""
        with pytest.raises(ValueError, match="out of range"):
            quantize_money(Decimal("1e27"))

    def test_infinity_raises_value_error(self):
        """Test that infinity is reported as a ValueError."""
        with pytest.raises(ValueError):
            quantize_money(Decimal("Infinity"))

    def test_negative_zero_is_collapsed(self):
        """Test that a negative zero result prints without a sign."""
        result = quantize_money(Decimal("-0.001"))
        assert result == 0
        assert str(result) == "0.00"


class TestMoneyAmount:
    """Test MoneyAmount validation."""

    def test_amount_from_string(self):
        """Test that string amounts are converted and quantized."""
        money = MoneyAmount(amount="1000", currency="EUR")
        assert money.amount == Decimal("1000.00")
        assert str(money.amount) == "1000.00"

    def test_amount_from_int_and_float(self):
        """Test that numeric inputs are converted via their string form."""
        assert MoneyAmount(amount=600).amount == Decimal("600.00")
        assert MoneyAmount(amount=0.1).amount == Decimal("0.10")

    def test_default_currency_is_eur(self):
        """Test the default currency."""
        assert MoneyAmount(amount="1").currency == "EUR"

    def test_currency_is_normalized(self):
        """Test that currency codes are upper-cased and stripped."""
        assert MoneyAmount(amount="1", currency=" usd ").currency == "USD"

    @pytest.mark.parametrize("currency", ["EU", "EURO", "E1R", ""])
    def test_invalid_currency_rejected(self, currency):
        """Test that non 3-letter codes are rejected."""
        with pytest.raises(ValidationError):
            MoneyAmount(amount="1", currency=currency)

    def test_negative_amount_rejected(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            MoneyAmount(amount="-0.01", currency="EUR")

    def test_zero_amount_allowed(self):
        """Test that zero is a valid amount."""
        assert MoneyAmount(amount="0").amount == Decimal("0.00")

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True])
    def test_non_numeric_amount_rejected(self, value):
        """Test that garbage, non-finite and boolean amounts are rejected."""
        with pytest.raises(ValidationError):
            MoneyAmount(amount=value)

    @pytest.mark.parametrize("value", ["1e26", "1e27", "123456789012345678901234567890"])
    def test_out_of_range_amount_rejected(self, value):
        """Test that amounts too large for cent precision are rejected."""
        with pytest.raises(ValidationError, match="out of range"):
            MoneyAmount(amount=value, currency="EUR")

    def test_large_amount_within_precision(self):
        """Test that the largest amounts representable in cents are kept."""
        amount = MoneyAmount(amount="12345678901234567890123456.78")
        assert amount.amount == Decimal("12345678901234567890123456.78")

    def test_is_immutable(self):
        """Test that amounts cannot be changed after creation."""
        money = MoneyAmount(amount="10")
        with pytest.raises(ValidationError):
            money.amount = Decimal("20")

    def test_str(self):
        """Test the display form."""
        assert str(MoneyAmount(amount="1200", currency="eur")) == "1200.00 EUR"

    def test_equality_is_by_value(self):
        """Test that equal amounts in equal currencies compare equal."""
        assert MoneyAmount(amount="5") == MoneyAmount(amount=Decimal("5.00"))
        assert MoneyAmount(amount="5") != MoneyAmount(amount="5", currency="USD")
