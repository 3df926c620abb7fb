"""Cart items exactly as the client submitted them.

Nothing in here is trusted: ``price`` is only the client's claim and is
compared against the catalog, never used to charge.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CartItem:
    product_id: str
    product_title: str
    quantity: int
    price: Decimal  # claimed, per unit, already in the checkout currency
    product_slug: str | None = None
    variant_id: str | None = None
    variant_title: str | None = None
    product_image_url: str | None = None

    @property
    def claimed_total(self) -> Decimal:
        return self.price * self.quantity


def claimed_subtotal(items: list[CartItem]) -> Decimal:
    """What the client believes the cart is worth before discounts."""
    return sum((item.claimed_total for item in items), Decimal("0"))
