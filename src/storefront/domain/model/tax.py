"""Tax configuration as stored in the store settings document."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError

MAX_TAX_RATES = 2


class TaxType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class TaxRate:
    """One named rate.

    For ``PERCENTAGE`` the rate is a fraction (0.1 means 10%). For
    ``FIXED`` it is a flat amount in the base currency.
    """

    name: str
    type: TaxType
    rate: Decimal


@dataclass(frozen=True)
class TaxSettings:
    is_active: bool
    tax_rates: tuple[TaxRate, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tax_rates", tuple(self.tax_rates))
        if len(self.tax_rates) > MAX_TAX_RATES:
            raise ValidationError(
                f"At most {MAX_TAX_RATES} tax rates may be configured, "
                f"got {len(self.tax_rates)}"
            )

    @property
    def applied_rate(self) -> TaxRate | None:
        """The rate that is charged: the first one, and only when active."""
        if not self.is_active or not self.tax_rates:
            return None
        return self.tax_rates[0]
