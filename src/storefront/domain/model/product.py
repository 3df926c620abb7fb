"""Catalog products as the pricing core sees them.

Products are owned by the CMS and edited out of band. The checkout only
ever reads them; ``currentPrice`` and ``basePrice`` are in the base
currency.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CatalogProduct:
    """A product document as read from the catalog.

    ``current_price`` may be missing or zero on a half-edited document and
    ``in_stock`` may be missing entirely; only an explicit ``False`` means
    out of stock.
    """

    id: str
    name: str
    current_price: Decimal | None = None
    base_price: Decimal | None = None
    in_stock: bool | None = None


@dataclass(frozen=True)
class ProductPrice:
    """A usable price for one product, in the base currency."""

    product_id: str
    price: Decimal
    original_price: Decimal | None = None

    @property
    def is_marked_down(self) -> bool:
        return self.original_price is not None and self.original_price > self.price
