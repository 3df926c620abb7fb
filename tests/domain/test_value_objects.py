"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import InvalidCurrencyError, ValidationError
from storefront.domain.model.value_objects import (
    Currency,
    Quantity,
    RateTable,
    differs,
    to_decimal,
)


# ── Currency ─────────────────────────────────────────────────────────────────


class TestCurrency:

    def test_base_is_xof(self):
        assert Currency.base() is Currency.XOF

    def test_parse_normalizes_case_and_whitespace(self):
        assert Currency.parse(" eur ") is Currency.EUR

    def test_missing_code_means_base(self):
        assert Currency.parse(None) is Currency.XOF
        assert Currency.parse("") is Currency.XOF

    def test_unknown_code_rejected(self):
        with pytest.raises(InvalidCurrencyError, match="Unsupported currency code"):
            Currency.parse("GBP")

    def test_invalid_currency_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Currency.parse("XXX")


# ── RateTable ────────────────────────────────────────────────────────────────


class TestRateTable:

    def test_defaults(self):
        table = RateTable()
        assert table.rate_for(Currency.XOF) == Decimal("1")
        assert table.rate_for(Currency.EUR) == Decimal("0.0015")
        assert table.rate_for(Currency.USD) == Decimal("0.0016")

    def test_overrides_replace_selected_rates(self):
        table = RateTable.with_overrides(EUR="0.002")
        assert table.rate_for(Currency.EUR) == Decimal("0.002")
        assert table.rate_for(Currency.USD) == Decimal("0.0016")

    def test_missing_currency_rejected(self):
        with pytest.raises(ValidationError, match="missing currencies"):
            RateTable({Currency.XOF: Decimal("1")})

    def test_base_rate_must_be_one(self):
        with pytest.raises(ValidationError, match="exactly 1"):
            RateTable(
                {
                    Currency.XOF: Decimal("2"),
                    Currency.EUR: Decimal("0.0015"),
                    Currency.USD: Decimal("0.0016"),
                }
            )

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            RateTable.with_overrides(USD="0")

    def test_float_rate_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            RateTable(
                {
                    Currency.XOF: Decimal("1"),
                    Currency.EUR: 0.0015,
                    Currency.USD: Decimal("0.0016"),
                }
            )

    def test_rates_cannot_be_mutated(self):
        table = RateTable()
        with pytest.raises(TypeError):
            table.rates[Currency.EUR] = Decimal("1")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-3)

    def test_fraction_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(1.5)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


# ── Money helpers ────────────────────────────────────────────────────────────


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            to_decimal("ten")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            to_decimal(True)


class TestDiffers:

    def test_within_tolerance(self):
        assert not differs(Decimal("10.00"), Decimal("10.01"))

    def test_beyond_tolerance(self):
        assert differs(Decimal("10.00"), Decimal("10.02"))
