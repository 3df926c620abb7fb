"""Deserialization of CMS-shaped documents into domain objects.

Both the JSON files used locally and the Sanity query API return the
same document shapes (camelCase, optional fields everywhere), so the
mapping lives here once. Anything that is not the expected shape raises
ValidationError.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import CatalogProduct
from storefront.domain.model.tax import MAX_TAX_RATES, TaxRate, TaxSettings, TaxType
from storefront.domain.model.value_objects import to_decimal

logger = logging.getLogger(__name__)


def catalog_product_from_document(doc: Any) -> CatalogProduct:
    if not isinstance(doc, dict):
        raise ValidationError(f"Product document must be an object, got {type(doc).__name__}")
    product_id = doc.get("_id") or doc.get("id")
    if not product_id:
        raise ValidationError("Product document has no id")
    in_stock = doc.get("inStock")
    return CatalogProduct(
        id=str(product_id),
        name=str(doc.get("name") or ""),
        current_price=_optional_decimal(doc.get("currentPrice")),
        base_price=_optional_decimal(doc.get("basePrice")),
        in_stock=None if in_stock is None else bool(in_stock),
    )


def catalog_product_to_document(product: CatalogProduct) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "currentPrice": _optional_str(product.current_price),
        "basePrice": _optional_str(product.base_price),
        "inStock": product.in_stock,
    }


def tax_settings_from_document(doc: Any) -> TaxSettings | None:
    """Map a settings document to TaxSettings.

    Returns None when the document or its ``taxSettings`` block is absent.
    Unset fields fall back to: active, named "Tax", percentage, rate 0.
    Rates beyond the supported number are dropped with an error log; only
    the first one is ever charged.
    """
    if not doc:
        return None
    if not isinstance(doc, dict):
        raise ValidationError(f"Settings document must be an object, got {type(doc).__name__}")
    block = doc.get("taxSettings")
    if not block:
        return None
    if not isinstance(block, dict):
        raise ValidationError("taxSettings must be an object")

    raw_rates = block.get("taxRates") or []
    if not isinstance(raw_rates, list):
        raise ValidationError("taxSettings.taxRates must be a list")
    if len(raw_rates) > MAX_TAX_RATES:
        logger.error(
            "Tax settings list %d rates but at most %d are supported; ignoring the rest",
            len(raw_rates),
            MAX_TAX_RATES,
        )
        raw_rates = raw_rates[:MAX_TAX_RATES]

    rates = []
    for raw in raw_rates:
        if not isinstance(raw, dict):
            raise ValidationError("Each tax rate must be an object")
        try:
            tax_type = TaxType(raw.get("type") or TaxType.PERCENTAGE.value)
        except ValueError:
            raise ValidationError(f"Unknown tax type: {raw.get('type')!r}") from None
        rates.append(
            TaxRate(
                name=raw.get("name") or "Tax",
                type=tax_type,
                rate=to_decimal(raw.get("rate") or 0),
            )
        )
    return TaxSettings(is_active=block.get("isActive") is not False, tax_rates=tuple(rates))


def _optional_decimal(value: Any) -> Decimal | None:
    return None if value is None else to_decimal(value)


def _optional_str(value: Decimal | None) -> str | None:
    return None if value is None else str(value)
