"""Data Transfer Objects - plain containers that cross layer boundaries.

Request DTOs carry what the HTTP or CLI layer received, untrusted and
only loosely typed. Result DTOs carry what the application hands back
without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one cart line as the browser submitted it."""

    product_id: str | None
    product_title: str | None
    quantity: Any
    price: Any
    product_slug: str | None = None
    variant_id: str | None = None
    variant_title: str | None = None
    product_image_url: str | None = None


@dataclass(frozen=True)
class ShippingAddressSpec:
    name: str
    address: str
    city: str
    country: str
    postal_code: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class CheckoutRequest:
    """Input: a full checkout submission."""

    cart_items: list[CartItemSpec] | None
    user_name: str | None
    user_email: str | None
    currency_code: str | None = None
    user_phone: str | None = None
    shipping_address: ShippingAddressSpec | None = None
    shipping_fee: Decimal | None = None
    tax_amount: Decimal | None = None  # client claim; recomputed server-side
    discount_amount: Decimal | None = None  # client claim; recomputed server-side
    subtotal: Decimal | None = None  # client claim; defaults to sum of claimed lines
    success_url_path: str | None = None
    cancel_url_path: str | None = None
    allow_coupon_code: bool | None = None
    allow_quantity: bool | None = None


@dataclass(frozen=True)
class CheckoutResult:
    """Output: where to send the customer to pay."""

    checkout_url: str
    order_id: str


@dataclass(frozen=True)
class QuoteLineDTO:
    product_id: str
    quantity: int
    claimed_total: str
    validated_total: str


@dataclass(frozen=True)
class QuoteDTO:
    """Output: server-side pricing for a cart, nothing persisted."""

    currency: str
    subtotal: str
    original_subtotal: str
    discount: str
    shipping_fee: str
    tax: str
    total: str
    is_valid: bool
    has_critical_errors: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    lines: list[QuoteLineDTO] = field(default_factory=list)


@dataclass(frozen=True)
class PaymentRecordDTO:
    """Output: what a payment webhook delivery led to."""

    handled: bool
    order_id: str
    event_type: str
    status: str | None = None
