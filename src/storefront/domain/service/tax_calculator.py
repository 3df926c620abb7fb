"""Domain service: tax and order totals.

Discount comes off before tax: tax is charged on the discounted subtotal,
never on the pre-discount one.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.order import OrderTotals
from storefront.domain.model.tax import TaxSettings, TaxType
from storefront.domain.model.value_objects import ZERO, Currency
from storefront.domain.service.currency_converter import CurrencyConverter


class TaxCalculator:

    def __init__(self, converter: CurrencyConverter) -> None:
        self._converter = converter

    def compute_tax(
        self,
        discounted_subtotal: Decimal,
        currency: Currency,
        settings: TaxSettings | None,
    ) -> Decimal:
        """Tax owed on *discounted_subtotal* (already in *currency*).

        Only the first configured rate is applied. A percentage rate scales
        the subtotal; a fixed rate is a flat base-currency amount that is
        converted but not scaled.
        """
        if settings is None:
            return ZERO
        tax_rate = settings.applied_rate
        if tax_rate is None:
            return ZERO

        if tax_rate.type is TaxType.PERCENTAGE:
            return discounted_subtotal * tax_rate.rate
        return self._converter.convert(tax_rate.rate, currency)

    def compute_totals(
        self,
        subtotal: Decimal,
        discount: Decimal,
        shipping_fee: Decimal,
        currency: Currency,
        settings: TaxSettings | None,
    ) -> OrderTotals:
        """Assemble the order header figures from a pre-discount *subtotal*."""
        tax = self.compute_tax(subtotal - discount, currency, settings)
        return OrderTotals(
            currency=currency,
            subtotal=subtotal,
            discount=discount,
            shipping_fee=shipping_fee,
            tax=tax,
        )
