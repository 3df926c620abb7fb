"""Turn untrusted request DTOs into domain objects, or refuse to.

Parse, don't validate: once these functions return, every cart line has
an ID, a title, a positive integer quantity and a positive price, and
the currency is one we support.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.application.dto import CheckoutRequest
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.order import Customer, ShippingAddress
from storefront.domain.model.value_objects import ZERO, Quantity, to_decimal


def parse_cart_items(request: CheckoutRequest) -> list[CartItem]:
    raw_items = request.cart_items
    if not raw_items:
        raise ValidationError("Cart items must be a non-empty array.")

    items: list[CartItem] = []
    for index, spec in enumerate(raw_items):
        if (
            not _present(spec.product_id)
            or not _present(spec.product_title)
            or spec.price is None
            or spec.quantity is None
        ):
            raise ValidationError(
                f"Invalid cart item at index {index}: missing required fields"
            )
        try:
            quantity = Quantity(spec.quantity).value
        except ValidationError:
            raise ValidationError(
                f"Invalid quantity for item at index {index}: must be greater than 0"
            ) from None
        price = to_decimal(spec.price)
        if price <= ZERO:
            raise ValidationError(
                f"Invalid price for item at index {index}: must be greater than 0"
            )
        items.append(
            CartItem(
                product_id=str(spec.product_id).strip(),
                product_title=str(spec.product_title).strip(),
                quantity=quantity,
                price=price,
                product_slug=spec.product_slug,
                variant_id=spec.variant_id,
                variant_title=spec.variant_title,
                product_image_url=spec.product_image_url,
            )
        )
    return items


def parse_customer(request: CheckoutRequest) -> Customer:
    for field_name, value in (
        ("userName", request.user_name),
        ("userEmail", request.user_email),
    ):
        if not _present(value):
            raise ValidationError(f"Missing or invalid required field: {field_name}")
    return Customer(
        name=request.user_name.strip(),  # type: ignore[union-attr]
        email=request.user_email.strip(),  # type: ignore[union-attr]
        phone=request.user_phone or None,
        whatsapp=request.user_phone or None,
    )


def parse_shipping_address(request: CheckoutRequest) -> ShippingAddress | None:
    spec = request.shipping_address
    if spec is None:
        return None
    return ShippingAddress(
        name=spec.name,
        address=spec.address,
        city=spec.city,
        country=spec.country,
        postal_code=spec.postal_code or None,
        phone=spec.phone or None,
    )


def optional_amount(value: Decimal | None) -> Decimal:
    """Missing client amounts count as zero."""
    return to_decimal(value)


def _present(value: object) -> bool:
    return value is not None and str(value).strip() != ""
