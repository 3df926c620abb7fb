"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from storefront.domain.exceptions import InvalidCurrencyError, ValidationError

# Differences up to one hundredth of a currency unit are rounding noise.
PRICE_TOLERANCE = Decimal("0.01")

ZERO = Decimal("0")


class Currency(Enum):
    """Currencies the store can price in. XOF is the catalog's base currency."""

    XOF = "XOF"
    EUR = "EUR"
    USD = "USD"

    @classmethod
    def base(cls) -> Currency:
        return cls.XOF

    @classmethod
    def parse(cls, code: str | None) -> Currency:
        """Normalize a client-supplied code.

        A missing code means the base currency. Anything else that is not
        one of our codes is rejected outright.
        """
        if code is None or not str(code).strip():
            return cls.base()
        normalized = str(code).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidCurrencyError(
                f"Unsupported currency code: {code!r}. "
                f"Expected one of {', '.join(c.value for c in cls)}"
            ) from None


DEFAULT_RATES: Mapping[Currency, Decimal] = MappingProxyType(
    {
        Currency.XOF: Decimal("1"),
        Currency.EUR: Decimal("0.0015"),
        Currency.USD: Decimal("0.0016"),
    }
)


@dataclass(frozen=True)
class RateTable:
    """Conversion rates from the base currency to every supported currency.

    Invariants:
    - every ``Currency`` has a rate
    - the base currency maps to exactly 1
    - every rate is strictly positive
    """

    rates: Mapping[Currency, Decimal] = field(default_factory=lambda: DEFAULT_RATES)

    def __post_init__(self) -> None:
        missing = [c.value for c in Currency if c not in self.rates]
        if missing:
            raise ValidationError(f"Rate table missing currencies: {', '.join(missing)}")
        if self.rates[Currency.base()] != Decimal("1"):
            raise ValidationError("Base currency rate must be exactly 1")
        for currency, rate in self.rates.items():
            if not isinstance(rate, Decimal):
                raise ValidationError(
                    f"Rate for {currency.value} must be a Decimal, got {type(rate).__name__}"
                )
            if rate <= ZERO:
                raise ValidationError(f"Rate for {currency.value} must be positive")
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def rate_for(self, currency: Currency) -> Decimal:
        return self.rates[currency]

    @staticmethod
    def with_overrides(**overrides: str | Decimal) -> RateTable:
        """Default rates with selected currencies replaced, e.g. ``EUR="0.0016"``."""
        rates = dict(DEFAULT_RATES)
        for code, value in overrides.items():
            rates[Currency(code.upper())] = to_decimal(value)
        return RateTable(rates)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


def to_decimal(amount: str | float | int | Decimal | None) -> Decimal:
    """Coerce a JSON-ish number to Decimal without binary float artifacts."""
    if amount is None:
        return ZERO
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid money amount: {amount!r}")
    try:
        return Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid money amount: {amount!r}") from exc


def differs(a: Decimal, b: Decimal) -> bool:
    """True when two amounts disagree by more than the rounding tolerance."""
    return abs(a - b) > PRICE_TOLERANCE
