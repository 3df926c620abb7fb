"""Domain service: convert base-currency prices to the checkout currency."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.value_objects import Currency, RateTable


class CurrencyConverter:
    """Multiplies by a fixed rate. No rounding happens here.

    Currency codes are parsed into ``Currency`` at the request boundary,
    so there is no "unknown currency" case to default.
    """

    def __init__(self, rate_table: RateTable) -> None:
        self._rate_table = rate_table

    @property
    def rate_table(self) -> RateTable:
        return self._rate_table

    def convert(self, amount_in_base: Decimal, target: Currency) -> Decimal:
        return amount_in_base * self._rate_table.rate_for(target)
