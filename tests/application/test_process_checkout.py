"""Integration tests for the ProcessCheckout use case.

Uses in-memory fakes for the catalog, tax settings, order store and
payment gateway; no file I/O and no network.
"""

import dataclasses
import logging
from decimal import Decimal

import pytest

from storefront.application.dto import CartItemSpec, CheckoutRequest
from storefront.application.process_checkout import ProcessCheckoutHandler
from storefront.domain.exceptions import (
    InvalidCurrencyError,
    OrderStoreError,
    PaymentGatewayError,
    PricingInvariantError,
    PricingRejectedError,
    ValidationError,
)
from storefront.domain.model.pricing import PricingValidationResult, RecalculatedItem
from storefront.domain.model.tax import TaxRate, TaxSettings, TaxType
from storefront.domain.model.value_objects import Currency, RateTable
from storefront.domain.service.catalog_pricing import CatalogPriceLookup
from storefront.domain.service.currency_converter import CurrencyConverter
from storefront.domain.service.pricing_validator import PricingValidator
from storefront.domain.service.tax_calculator import TaxCalculator
from storefront.domain.service.tax_policy import TaxPolicyResolver
from tests.fakes import (
    FakeCatalogRepository,
    FakeOrderStore,
    FakePaymentGateway,
    FakeTaxSettingsRepository,
    product,
)

VAT = TaxSettings(True, (TaxRate("TVA", TaxType.PERCENTAGE, Decimal("0.18")),))


def _setup(
    products=None,
    tax_settings: TaxSettings | None = None,
    gateway: FakePaymentGateway | None = None,
) -> tuple[ProcessCheckoutHandler, FakeOrderStore, FakePaymentGateway]:
    """Build handler with fakes, pre-loaded with a small catalog."""
    if products is None:
        products = [product("p1", "1000"), product("p2", "2500", "3000")]
    converter = CurrencyConverter(RateTable())
    store = FakeOrderStore()
    gateway = gateway or FakePaymentGateway()
    handler = ProcessCheckoutHandler(
        pricing_validator=PricingValidator(
            CatalogPriceLookup(FakeCatalogRepository(products)), converter
        ),
        tax_policy=TaxPolicyResolver(FakeTaxSettingsRepository(tax_settings)),
        tax_calculator=TaxCalculator(converter),
        order_store=store,
        payment_gateway=gateway,
        app_base_url="https://shop.example/",
    )
    return handler, store, gateway


def _request(*items: CartItemSpec, **overrides) -> CheckoutRequest:
    fields = dict(
        cart_items=list(items) or [CartItemSpec("p1", "Tote", 2, 1000)],
        user_name="Awa Diop",
        user_email="awa@example.com",
    )
    fields.update(overrides)
    return CheckoutRequest(**fields)


class TestCheckoutHappyPath:

    def test_returns_checkout_url_and_order_id(self):
        handler, _, _ = _setup()
        result = handler.handle(_request())
        assert result.order_id == "order-1"
        assert result.checkout_url == "https://checkout.example/cs_1"

    def test_persists_validated_totals(self):
        handler, store, _ = _setup()
        handler.handle(_request())
        totals = store.orders["order-1"]["totals"]
        assert totals.subtotal == Decimal("2000")
        assert totals.discount == Decimal("0")
        assert totals.tax == Decimal("0")
        assert totals.total == Decimal("2000")

    def test_persists_customer_then_order_then_items(self):
        handler, store, _ = _setup()
        handler.handle(
            _request(CartItemSpec("p1", "Tote", 1, 1000), CartItemSpec("p2", "Cushion", 1, 2500))
        )
        assert store.customers[0].email == "awa@example.com"
        assert store.orders["order-1"]["customer_id"] == "cust-1"
        assert [line.product_id for _, line in store.items] == ["p1", "p2"]

    def test_records_session_on_order(self):
        handler, store, _ = _setup()
        handler.handle(_request())
        order_id, session_id, url, details = store.sessions[0]
        assert (order_id, session_id, url) == ("order-1", "cs_1", "https://checkout.example/cs_1")
        assert set(details) == {"request", "response"}

    def test_markdown_total_and_tax(self):
        handler, store, gateway = _setup(tax_settings=VAT)
        handler.handle(
            _request(CartItemSpec("p2", "Cushion", 2, 2500), discount_amount=1000, shipping_fee=1500)
        )
        totals = store.orders["order-1"]["totals"]
        assert totals.subtotal == Decimal("6000")
        assert totals.discount == Decimal("1000")
        assert totals.tax == Decimal("900")
        assert totals.total == Decimal("7400")


class TestCheckoutTampering:

    def test_scenario_stale_price_proceeds_with_server_price(self):
        handler, store, gateway = _setup()
        handler.handle(_request(CartItemSpec("p1", "Tote", 2, 1200)))
        assert store.orders["order-1"]["totals"].total == Decimal("2000")
        _, line = store.items[0]
        assert line.price_per_item == Decimal("1000")
        assert gateway.requests[0].line_items[0].unit_amount == Decimal("1000")

    def test_client_tax_claim_is_ignored(self):
        handler, store, _ = _setup(tax_settings=VAT)
        handler.handle(_request(tax_amount=1))
        assert store.orders["order-1"]["totals"].tax == Decimal("360")

    def test_invalid_currency_rejected_before_pricing(self):
        handler, store, gateway = _setup()
        with pytest.raises(InvalidCurrencyError):
            handler.handle(_request(currency_code="BTC"))
        assert store.customers == []
        assert gateway.requests == []

    def test_prices_in_requested_currency(self):
        handler, store, gateway = _setup()
        handler.handle(_request(CartItemSpec("p1", "Tote", 2, "1.5"), currency_code="eur"))
        totals = store.orders["order-1"]["totals"]
        assert totals.currency is Currency.EUR
        assert totals.total == Decimal("3")
        assert gateway.requests[0].currency is Currency.EUR


class TestCheckoutBlocked:

    def test_scenario_unknown_product_touches_nothing(self):
        handler, store, gateway = _setup()
        with pytest.raises(PricingRejectedError) as info:
            handler.handle(
                _request(CartItemSpec("p1", "Tote", 1, 1000), CartItemSpec("ghost", "Ghost", 1, 10))
            )
        assert len(info.value.errors) == 1
        assert "ghost" in info.value.errors[0]
        assert store.customers == []
        assert store.orders == {}
        assert store.items == []
        assert gateway.requests == []

    def test_out_of_stock_blocks(self):
        handler, store, _ = _setup(products=[product("p1", "1000", in_stock=False)])
        with pytest.raises(PricingRejectedError):
            handler.handle(_request())
        assert store.orders == {}

    def test_empty_cart(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="non-empty array"):
            handler.handle(CheckoutRequest(cart_items=[], user_name="A", user_email="a@b.c"))

    def test_missing_email(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="userEmail"):
            handler.handle(_request(user_email=" "))

    def test_unaligned_pricing_is_an_invariant_failure(self):
        handler, store, _ = _setup()
        result = PricingValidationResult(
            currency=Currency.XOF,
            errors=(),
            warnings=(),
            recalculated_items=(RecalculatedItem("p1", 2, Decimal("2000"), Decimal("0"), Decimal("2000")),),
            subtotal=Decimal("0"),
            original_subtotal=Decimal("0"),
            discount=Decimal("0"),
            original_discount=Decimal("0"),
        )
        handler._pricing_validator.validate = lambda *args, **kwargs: result
        with pytest.raises(PricingInvariantError, match="No validated price for product p1"):
            handler.handle(_request())
        assert store.customers == []


class TestPaymentSession:

    def test_line_items_sum_to_order_total(self):
        handler, store, gateway = _setup(tax_settings=VAT)
        handler.handle(
            _request(
                CartItemSpec("p1", "Tote", 3, 1000),
                CartItemSpec("p2", "Cushion", 1, 2500, variant_id="v1", variant_title="Indigo"),
                shipping_fee=2000,
                discount_amount=500,
            )
        )
        session = gateway.requests[0]
        assert session.amount == store.orders["order-1"]["totals"].total
        names = [line.name for line in session.line_items]
        assert names == ["Tote", "Cushion - Indigo", "Shipping", "TVA"]
        assert session.line_items[1].metadata == {"product_id": "p2", "variant_id": "v1"}

    def test_no_shipping_or_tax_lines_when_zero(self):
        handler, _, gateway = _setup()
        handler.handle(_request())
        assert [line.name for line in gateway.requests[0].line_items] == ["Tote"]

    def test_negative_shipping_is_charged_as_recorded(self, caplog):
        handler, store, gateway = _setup()
        with caplog.at_level(logging.WARNING):
            result = handler.handle(_request(shipping_fee=-500))
        assert result.order_id == "order-1"
        assert "Invalid shipping cost: -500" in caplog.text
        totals = store.orders["order-1"]["totals"]
        assert totals.total == Decimal("1500")
        session = gateway.requests[0]
        assert session.amount == totals.total
        assert [(line.name, line.amount) for line in session.line_items] == [
            ("Tote", Decimal("2000")),
            ("Shipping", Decimal("-500")),
        ]

    def test_amount_mismatch_never_reaches_gateway(self):
        handler, _, gateway = _setup(tax_settings=VAT)
        build = handler._session_request

        def without_tax_line(*args):
            session_request = build(*args)
            return dataclasses.replace(session_request, line_items=session_request.line_items[:-1])

        handler._session_request = without_tax_line
        with pytest.raises(PricingInvariantError, match="Payment amount does not match"):
            handler.handle(_request(shipping_fee=1000))
        assert gateway.requests == []

    def test_redirect_urls_and_metadata(self):
        handler, _, gateway = _setup()
        handler.handle(_request(success_url_path="/merci"))
        session = gateway.requests[0]
        assert session.success_url == "https://shop.example/merci?order_id=order-1&status=success"
        assert session.cancel_url == "https://shop.example/payment/error?order_id=order-1&status=cancelled"
        assert session.metadata["internal_order_id"] == "order-1"
        assert session.metadata["customer_id"] == "cust-1"
        assert session.metadata["item_count"] == 1
        assert session.title == "Order (1 items)"
        assert session.description == "Your order: 2x Tote"
        assert session.allow_coupon_code is True
        assert session.allow_quantity is False

    def test_gateway_failure_marks_order_failed(self):
        gateway = FakePaymentGateway(
            error=PaymentGatewayError("Failed to create lomi. checkout session", details={"status": 401})
        )
        handler, store, _ = _setup(gateway=gateway)
        with pytest.raises(PaymentGatewayError):
            handler.handle(_request())
        order_id, session_id, url, details = store.sessions[0]
        assert (order_id, session_id, url) == ("order-1", "failed", "failed")
        assert details["response"] == {"status": 401}

    def test_duplicate_session_is_tolerated(self):
        handler, store, _ = _setup()
        store.session_error = "Order order-1 already has a lomi session ID"
        result = handler.handle(_request())
        assert result.checkout_url == "https://checkout.example/cs_1"

    def test_datastore_failure_stops_checkout(self):
        handler, store, gateway = _setup()
        store.fail_on.add("create_order")
        with pytest.raises(OrderStoreError):
            handler.handle(_request())
        assert gateway.requests == []
