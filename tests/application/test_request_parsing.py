"""Unit tests for request parsing."""

from decimal import Decimal

import pytest

from storefront.application.dto import CartItemSpec, CheckoutRequest, ShippingAddressSpec
from storefront.application.request_parsing import (
    parse_cart_items,
    parse_customer,
    parse_shipping_address,
)
from storefront.domain.exceptions import ValidationError


def _request(*items, **overrides) -> CheckoutRequest:
    fields = dict(cart_items=list(items), user_name="Awa", user_email="awa@example.com")
    fields.update(overrides)
    return CheckoutRequest(**fields)


class TestParseCartItems:

    def test_parses_valid_items(self):
        items = parse_cart_items(
            _request(CartItemSpec(" p1 ", "Tote", 2, "1000.50", variant_id="v1"))
        )
        assert items[0].product_id == "p1"
        assert items[0].price == Decimal("1000.50")
        assert items[0].variant_id == "v1"

    def test_missing_cart(self):
        with pytest.raises(ValidationError, match="non-empty array"):
            parse_cart_items(_request(cart_items=None))

    @pytest.mark.parametrize(
        "spec",
        [
            CartItemSpec(None, "Tote", 1, 1000),
            CartItemSpec("p1", "  ", 1, 1000),
            CartItemSpec("p1", "Tote", None, 1000),
            CartItemSpec("p1", "Tote", 1, None),
        ],
    )
    def test_missing_fields(self, spec):
        with pytest.raises(ValidationError, match="index 1: missing required fields"):
            parse_cart_items(_request(CartItemSpec("p0", "Ok", 1, 1), spec))

    @pytest.mark.parametrize("quantity", [0, -1, 1.5])
    def test_bad_quantity(self, quantity):
        with pytest.raises(ValidationError, match="Invalid quantity for item at index 0"):
            parse_cart_items(_request(CartItemSpec("p1", "Tote", quantity, 1000)))

    @pytest.mark.parametrize("price", [0, -5])
    def test_bad_price(self, price):
        with pytest.raises(ValidationError, match="Invalid price for item at index 0"):
            parse_cart_items(_request(CartItemSpec("p1", "Tote", 1, price)))


class TestParseCustomer:

    def test_phone_doubles_as_whatsapp(self):
        customer = parse_customer(_request(user_phone="+221770000000"))
        assert customer.whatsapp == "+221770000000"

    def test_missing_name(self):
        with pytest.raises(ValidationError, match="userName"):
            parse_customer(_request(user_name=None))


class TestParseShippingAddress:

    def test_optional(self):
        assert parse_shipping_address(_request()) is None

    def test_blank_postal_code_is_none(self):
        address = parse_shipping_address(
            _request(shipping_address=ShippingAddressSpec("Awa", "12 Rue X", "Dakar", "SN", ""))
        )
        assert address.city == "Dakar"
        assert address.postal_code is None
