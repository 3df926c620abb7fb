"""Application service: Process Checkout use case.

Orchestrates the whole checkout, strictly in this order:

1. Parse the request (cart shape, customer, currency).
2. Re-price the cart against the catalog; any critical pricing error
   aborts before anything is written.
3. Compute tax and totals from the validated figures.
4. Persist customer, order header, then one row per cart line.
5. Open a payment session for the same validated figures and record it
   against the order.

Client-submitted prices and totals are never persisted or charged.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from storefront.application.dto import CheckoutRequest, CheckoutResult
from storefront.application.request_parsing import (
    optional_amount,
    parse_cart_items,
    parse_customer,
    parse_shipping_address,
)
from storefront.domain.exceptions import (
    OrderStoreError,
    PaymentGatewayError,
    PricingInvariantError,
    PricingRejectedError,
)
from storefront.domain.model.cart import CartItem, claimed_subtotal
from storefront.domain.model.order import OrderLine, OrderTotals
from storefront.domain.model.payment import (
    CheckoutSession,
    CheckoutSessionRequest,
    PaymentLineItem,
)
from storefront.domain.model.pricing import PricingValidationResult
from storefront.domain.model.tax import TaxSettings
from storefront.domain.model.value_objects import ZERO, Currency, differs
from storefront.domain.repository.order_store import OrderStore
from storefront.domain.repository.payment_gateway import PaymentGateway
from storefront.domain.service.pricing_validator import PricingValidator
from storefront.domain.service.tax_calculator import TaxCalculator
from storefront.domain.service.tax_policy import TaxPolicyResolver

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_PATH = "/payment/success"
DEFAULT_CANCEL_PATH = "/payment/error"
APP_SOURCE = "kysfactory_store"
FAILED_SESSION_MARKER = "failed"
DUPLICATE_SESSION_MESSAGE = "already has a lomi session ID"


class ProcessCheckoutHandler:

    def __init__(
        self,
        pricing_validator: PricingValidator,
        tax_policy: TaxPolicyResolver,
        tax_calculator: TaxCalculator,
        order_store: OrderStore,
        payment_gateway: PaymentGateway,
        app_base_url: str,
    ) -> None:
        self._pricing_validator = pricing_validator
        self._tax_policy = tax_policy
        self._tax_calculator = tax_calculator
        self._order_store = order_store
        self._payment_gateway = payment_gateway
        self._app_base_url = app_base_url.rstrip("/")

    def handle(self, request: CheckoutRequest) -> CheckoutResult:
        """Run one checkout attempt end to end.

        Raises ValidationError for a malformed request, PricingRejectedError
        when the cart cannot be priced, OrderStoreError when persistence
        fails and PaymentGatewayError when no session could be opened.
        """
        items = parse_cart_items(request)
        customer = parse_customer(request)
        currency = Currency.parse(request.currency_code)
        shipping_address = parse_shipping_address(request)

        client_subtotal = (
            request.subtotal if request.subtotal is not None else claimed_subtotal(items)
        )
        pricing = self._pricing_validator.validate(
            items,
            currency,
            client_subtotal=optional_amount(client_subtotal),
            client_discount=optional_amount(request.discount_amount),
        )
        if pricing.has_critical_errors:
            logger.error(
                "Checkout blocked: %d of %d cart items could not be priced",
                len(pricing.errors),
                len(items),
            )
            raise PricingRejectedError(list(pricing.errors))

        shipping_fee = optional_amount(request.shipping_fee)
        if shipping_fee < ZERO:
            logger.warning(
                "Invalid shipping cost: %s. Must be non-negative.", shipping_fee
            )

        tax_settings = self._tax_policy.fetch_tax_settings()
        totals = self._tax_calculator.compute_totals(
            subtotal=pricing.original_subtotal,
            discount=pricing.discount,
            shipping_fee=shipping_fee,
            currency=currency,
            settings=tax_settings,
        )
        if request.tax_amount is not None and differs(totals.tax, request.tax_amount):
            logger.warning(
                "Tax mismatch: client sent %.2f %s, server calculated %.2f %s",
                request.tax_amount,
                currency.value,
                totals.tax,
                currency.value,
            )

        # Built before anything is written so a broken invariant persists nothing.
        lines = self._order_lines(items, pricing)

        customer_id = self._order_store.upsert_customer(customer)
        logger.info("Customer upserted: %s", customer_id)

        order_id = self._order_store.create_order(customer_id, totals, shipping_address)
        logger.info(
            "Order %s created: total=%s %s", order_id, totals.total, currency.value
        )

        for line in lines:
            self._order_store.create_order_item(order_id, line)
        logger.info("Created %d order items for order %s", len(lines), order_id)

        session_request = self._session_request(
            request, order_id, customer_id, lines, totals, tax_settings
        )
        if session_request.amount != totals.total:
            logger.critical(
                "Payment line items for order %s sum to %s but the order total is %s",
                order_id,
                session_request.amount,
                totals.total,
            )
            raise PricingInvariantError(
                f"Payment amount does not match the total of order {order_id}"
            )
        session = self._open_session(order_id, session_request)
        logger.info("Checkout session %s created for order %s", session.session_id, order_id)

        return CheckoutResult(checkout_url=session.checkout_url, order_id=order_id)

    # --- Order lines ----------------------------------------------------------

    @staticmethod
    def _order_lines(
        items: list[CartItem], pricing: PricingValidationResult
    ) -> list[OrderLine]:
        if len(pricing.recalculated_items) != len(items):
            logger.critical(
                "Recalculated items (%d) do not line up with cart items (%d)",
                len(pricing.recalculated_items),
                len(items),
            )
            raise PricingInvariantError("Validated prices do not match the cart")

        lines: list[OrderLine] = []
        for item, validated in zip(items, pricing.recalculated_items):
            if validated.product_id != item.product_id or not validated.is_priced:
                logger.critical(
                    "No validated price for %s after pricing passed; refusing client price %s",
                    item.product_id,
                    item.price,
                )
                raise PricingInvariantError(
                    f"No validated price for product {item.product_id}"
                )
            lines.append(
                OrderLine(
                    product_id=item.product_id,
                    product_title=item.product_title,
                    quantity=item.quantity,
                    price_per_item=validated.validated_unit_price,
                    product_slug=item.product_slug,
                    variant_id=item.variant_id,
                    variant_title=item.variant_title,
                    product_image_url=item.product_image_url,
                )
            )
        return lines

    # --- Payment session ------------------------------------------------------

    def _session_request(
        self,
        request: CheckoutRequest,
        order_id: str,
        customer_id: str,
        lines: list[OrderLine],
        totals: OrderTotals,
        tax_settings: TaxSettings | None,
    ) -> CheckoutSessionRequest:
        currency = totals.currency
        line_items: list[PaymentLineItem] = [
            PaymentLineItem(
                name=_line_name(line),
                unit_amount=line.price_per_item,
                quantity=line.quantity,
                currency=currency,
                images=(line.product_image_url,) if line.product_image_url else (),
                metadata=_line_metadata(line),
            )
            for line in lines
        ]
        if totals.shipping_fee != ZERO:
            line_items.append(
                PaymentLineItem("Shipping", totals.shipping_fee, 1, currency)
            )
        if totals.tax != ZERO:
            tax_rate = tax_settings.applied_rate if tax_settings else None
            line_items.append(
                PaymentLineItem(tax_rate.name if tax_rate else "Tax", totals.tax, 1, currency)
            )

        success_path = request.success_url_path or DEFAULT_SUCCESS_PATH
        cancel_path = request.cancel_url_path or DEFAULT_CANCEL_PATH
        quoted_id = quote(order_id, safe="")

        return CheckoutSessionRequest(
            success_url=f"{self._app_base_url}{success_path}?order_id={quoted_id}&status=success",
            cancel_url=f"{self._app_base_url}{cancel_path}?order_id={quoted_id}&status=cancelled",
            currency=currency,
            customer_name=request.user_name or "",
            customer_email=request.user_email or "",
            customer_phone=request.user_phone or None,
            line_items=tuple(line_items),
            title=f"Order ({len(lines)} items)",
            description="Your order: "
            + ", ".join(f"{line.quantity}x {line.product_title}" for line in lines),
            allow_coupon_code=(
                request.allow_coupon_code if request.allow_coupon_code is not None else True
            ),
            allow_quantity=bool(request.allow_quantity),
            metadata={
                "internal_order_id": order_id,
                "customer_id": customer_id,
                "app_source": APP_SOURCE,
                "item_count": len(lines),
                "total_shipping_cost": totals.shipping_fee,
                "total_tax": totals.tax,
                "total_discount": totals.discount,
            },
        )

    def _open_session(
        self, order_id: str, session_request: CheckoutSessionRequest
    ) -> CheckoutSession:
        try:
            session = self._payment_gateway.create_checkout_session(session_request)
        except PaymentGatewayError as exc:
            logger.error("Payment session for order %s failed: %s", order_id, exc)
            self._mark_session_failed(order_id, exc)
            raise

        try:
            self._order_store.update_order_payment_session(
                order_id,
                session.session_id,
                session.checkout_url,
                {"request": session.request_payload, "response": session.response_payload},
            )
        except OrderStoreError as exc:
            if DUPLICATE_SESSION_MESSAGE in str(exc):
                logger.info(
                    "Order %s already has payment session details, keeping checkout URL",
                    order_id,
                )
            else:
                logger.warning(
                    "Could not record payment session on order %s: %s", order_id, exc
                )
        return session

    def _mark_session_failed(self, order_id: str, exc: PaymentGatewayError) -> None:
        try:
            self._order_store.update_order_payment_session(
                order_id,
                FAILED_SESSION_MARKER,
                FAILED_SESSION_MARKER,
                {"error": str(exc), "response": exc.details},
            )
        except OrderStoreError:
            logger.exception("Could not mark payment session failed on order %s", order_id)


def _line_name(line: OrderLine) -> str:
    if line.variant_title:
        return f"{line.product_title} - {line.variant_title}"
    return line.product_title


def _line_metadata(line: OrderLine) -> dict[str, str]:
    metadata = {"product_id": line.product_id}
    if line.variant_id:
        metadata["variant_id"] = line.variant_id
    return metadata
