"""Order-side value objects: money totals and what gets persisted.

Orders themselves live in the external datastore; the core only decides
the numbers that go into them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.value_objects import Currency


@dataclass(frozen=True)
class OrderTotals:
    """Every monetary figure of an order header.

    ``subtotal`` is the pre-discount sum, so the header always satisfies
    ``total == subtotal + shipping_fee + tax - discount``.
    """

    currency: Currency
    subtotal: Decimal
    discount: Decimal
    shipping_fee: Decimal
    tax: Decimal

    @property
    def discounted_subtotal(self) -> Decimal:
        return self.subtotal - self.discount

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping_fee + self.tax - self.discount


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str | None = None
    whatsapp: str | None = None
    organization: str | None = None


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    address: str
    city: str
    country: str
    postal_code: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class OrderLine:
    """One persisted order row, priced at the validated unit price."""

    product_id: str
    product_title: str
    quantity: int
    price_per_item: Decimal
    product_slug: str | None = None
    variant_id: str | None = None
    variant_title: str | None = None
    product_image_url: str | None = None

    @property
    def total_amount(self) -> Decimal:
        return self.price_per_item * self.quantity
