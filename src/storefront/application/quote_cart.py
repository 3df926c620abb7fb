"""Application service: Quote Cart use case (query).

Prices a cart exactly like checkout does, including tax and totals, but
persists nothing and never blocks: critical errors are reported in the
result instead of raised.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.application.dto import CheckoutRequest, QuoteDTO, QuoteLineDTO
from storefront.application.request_parsing import optional_amount, parse_cart_items
from storefront.domain.model.cart import claimed_subtotal
from storefront.domain.model.value_objects import Currency
from storefront.domain.service.pricing_validator import PricingValidator
from storefront.domain.service.tax_calculator import TaxCalculator
from storefront.domain.service.tax_policy import TaxPolicyResolver


class QuoteCartHandler:

    def __init__(
        self,
        pricing_validator: PricingValidator,
        tax_policy: TaxPolicyResolver,
        tax_calculator: TaxCalculator,
    ) -> None:
        self._pricing_validator = pricing_validator
        self._tax_policy = tax_policy
        self._tax_calculator = tax_calculator

    def handle(self, request: CheckoutRequest) -> QuoteDTO:
        items = parse_cart_items(request)
        currency = Currency.parse(request.currency_code)
        client_subtotal = (
            request.subtotal if request.subtotal is not None else claimed_subtotal(items)
        )

        pricing = self._pricing_validator.validate(
            items,
            currency,
            client_subtotal=optional_amount(client_subtotal),
            client_discount=optional_amount(request.discount_amount),
        )
        totals = self._tax_calculator.compute_totals(
            subtotal=pricing.original_subtotal,
            discount=pricing.discount,
            shipping_fee=optional_amount(request.shipping_fee),
            currency=currency,
            settings=self._tax_policy.fetch_tax_settings(),
        )

        return QuoteDTO(
            currency=currency.value,
            subtotal=_fmt(pricing.subtotal),
            original_subtotal=_fmt(pricing.original_subtotal),
            discount=_fmt(totals.discount),
            shipping_fee=_fmt(totals.shipping_fee),
            tax=_fmt(totals.tax),
            total=_fmt(totals.total),
            is_valid=pricing.is_valid,
            has_critical_errors=pricing.has_critical_errors,
            errors=list(pricing.errors),
            warnings=list(pricing.warnings),
            lines=[
                QuoteLineDTO(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    claimed_total=_fmt(line.original_price),
                    validated_total=_fmt(line.validated_price),
                )
                for line in pricing.recalculated_items
            ],
        )


def _fmt(amount: Decimal) -> str:
    return f"{amount:.2f}"
