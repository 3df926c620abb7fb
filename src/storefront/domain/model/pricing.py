"""Outcome of re-pricing a cart against the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.value_objects import Currency, ZERO


@dataclass(frozen=True)
class RecalculatedItem:
    """Client claim vs. catalog truth for one cart line.

    ``original_price`` and ``validated_price`` are line totals (unit price
    times quantity). A line that could not be priced carries a
    ``validated_price`` of zero and stays in the list so that index ``i``
    always lines up with cart item ``i``.
    """

    product_id: str
    quantity: int
    original_price: Decimal
    validated_price: Decimal
    price_difference: Decimal

    @property
    def is_priced(self) -> bool:
        return self.validated_price > ZERO

    @property
    def validated_unit_price(self) -> Decimal:
        return self.validated_price / self.quantity


@dataclass(frozen=True)
class PricingValidationResult:
    """Server-side pricing for a cart.

    ``subtotal`` and ``discount`` are the numbers downstream steps use,
    whatever the client claimed. ``original_discount`` echoes the client's
    claimed discount for auditing.
    """

    currency: Currency
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    recalculated_items: tuple[RecalculatedItem, ...]
    subtotal: Decimal
    original_subtotal: Decimal
    discount: Decimal
    original_discount: Decimal

    @property
    def has_critical_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def is_valid(self) -> bool:
        return not self.has_critical_errors and len(self.warnings) == 0
