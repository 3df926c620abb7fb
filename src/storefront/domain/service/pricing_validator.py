"""Domain service: Pricing Validation.

Re-derives every monetary figure of a cart from the catalog and sorts
what it finds into two severities:

* **warnings** - the client's numbers disagree with ours (stale page,
  rate drift, tampering). Our numbers win and checkout continues.
* **errors** - a line cannot be priced at all (unknown product, out of
  stock, no price). Checkout must stop; partial orders do not exist.

All catalog prices are in the base currency and are converted to the
checkout currency before being compared with anything the client sent.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from storefront.domain.exceptions import (
    CatalogLookupError,
    CatalogUnavailableError,
    ProductNotFoundError,
)
from storefront.domain.model.cart import CartItem
from storefront.domain.model.pricing import PricingValidationResult, RecalculatedItem
from storefront.domain.model.product import CatalogProduct
from storefront.domain.model.value_objects import ZERO, Currency, differs
from storefront.domain.service.catalog_pricing import CatalogPriceLookup
from storefront.domain.service.currency_converter import CurrencyConverter

logger = logging.getLogger(__name__)


class PricingValidator:

    def __init__(
        self,
        catalog: CatalogPriceLookup,
        converter: CurrencyConverter,
    ) -> None:
        self._catalog = catalog
        self._converter = converter

    def validate(
        self,
        items: list[CartItem],
        currency: Currency,
        client_subtotal: Decimal,
        client_discount: Decimal,
    ) -> PricingValidationResult:
        """Re-price *items* in *currency* and compare with the client's claims.

        Steps:
        1. Load every product in one catalog read.
        2. Price each line in cart order; unpriceable lines become errors
           and keep a zero-priced placeholder so indexes stay aligned.
        3. Derive the discount from genuine markdowns only.
        4. Compare subtotal and discount with the client's claims.
        """
        errors: list[str] = []
        warnings: list[str] = []
        recalculated: list[RecalculatedItem] = []
        subtotal = ZERO
        original_subtotal = ZERO

        products, unavailable = self._load_products(items)

        for item in items:
            client_item_total = item.claimed_total

            if unavailable is not None:
                errors.append(
                    f"Error validating item {item.product_id} "
                    f"({item.product_title}): {unavailable}"
                )
                recalculated.append(_placeholder(item, client_item_total))
                continue

            try:
                pricing = self._catalog.resolve(
                    item.product_id, products.get(item.product_id)
                )
            except ProductNotFoundError:
                errors.append(
                    f"Product {item.product_id} ({item.product_title}) "
                    f"not found or unavailable"
                )
                recalculated.append(_placeholder(item, client_item_total))
                continue
            except CatalogLookupError as exc:
                errors.append(
                    f"Error validating item {item.product_id} "
                    f"({item.product_title}): {exc}"
                )
                recalculated.append(_placeholder(item, client_item_total))
                continue

            unit_price = self._converter.convert(pricing.price, currency)
            validated_item_total = unit_price * item.quantity
            difference = abs(validated_item_total - client_item_total)

            if differs(validated_item_total, client_item_total):
                warnings.append(
                    f"Price mismatch for {item.product_title}: client sent "
                    f"{client_item_total:.2f} {currency.value}, but server calculated "
                    f"{validated_item_total:.2f} {currency.value}. Using server price."
                )

            recalculated.append(
                RecalculatedItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    original_price=client_item_total,
                    validated_price=validated_item_total,
                    price_difference=difference,
                )
            )
            subtotal += validated_item_total

            # Only a genuine markdown (original above current) yields a discount.
            if pricing.is_marked_down:
                original_unit = self._converter.convert(pricing.original_price, currency)
                original_subtotal += original_unit * item.quantity
            else:
                original_subtotal += validated_item_total

        discount = max(ZERO, original_subtotal - subtotal)

        if differs(discount, client_discount):
            warnings.append(
                f"Discount mismatch: client sent {client_discount:.2f} {currency.value}, "
                f"but server calculated {discount:.2f} {currency.value}. "
                f"Using server-calculated discount."
            )
        if differs(subtotal, client_subtotal):
            warnings.append(
                f"Subtotal mismatch: client sent {client_subtotal:.2f} {currency.value}, "
                f"but server calculated {subtotal:.2f} {currency.value}. "
                f"Using server-calculated subtotal."
            )

        for message in errors:
            logger.error("Pricing error: %s", message)
        for message in warnings:
            logger.warning("Pricing warning: %s", message)

        return PricingValidationResult(
            currency=currency,
            errors=tuple(errors),
            warnings=tuple(warnings),
            recalculated_items=tuple(recalculated),
            subtotal=subtotal,
            original_subtotal=original_subtotal,
            discount=discount,
            original_discount=client_discount,
        )

    # --- Internal helpers -----------------------------------------------------

    def _load_products(
        self, items: list[CartItem]
    ) -> tuple[dict[str, CatalogProduct], CatalogUnavailableError | None]:
        try:
            return self._catalog.fetch_products([i.product_id for i in items]), None
        except CatalogUnavailableError as exc:
            logger.exception("Catalog read failed for %d cart items", len(items))
            return {}, exc


def _placeholder(item: CartItem, client_item_total: Decimal) -> RecalculatedItem:
    return RecalculatedItem(
        product_id=item.product_id,
        quantity=item.quantity,
        original_price=client_item_total,
        validated_price=ZERO,
        price_difference=client_item_total,
    )
