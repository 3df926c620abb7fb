"""Domain service: turn catalog documents into usable prices.

A product is only priceable when it exists, is not explicitly out of
stock and carries a non-zero current price. Each failure has its own
exception type because each deserves a different message upstream.
"""

from __future__ import annotations

from storefront.domain.exceptions import (
    NoPriceSetError,
    OutOfStockError,
    ProductNotFoundError,
)
from storefront.domain.model.product import CatalogProduct, ProductPrice
from storefront.domain.model.value_objects import ZERO
from storefront.domain.repository.catalog_repository import CatalogRepository


class CatalogPriceLookup:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def fetch_price(self, product_id: str) -> ProductPrice:
        """Price a single product straight from the catalog."""
        return self.resolve(product_id, self._catalog_repo.get_by_id(product_id))

    def fetch_products(self, product_ids: list[str]) -> dict[str, CatalogProduct]:
        """Load every distinct product in one catalog read."""
        unique_ids = list(dict.fromkeys(product_ids))
        return self._catalog_repo.get_many(unique_ids)

    @staticmethod
    def resolve(product_id: str, product: CatalogProduct | None) -> ProductPrice:
        """Price an already-loaded product, or explain why it cannot be."""
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.in_stock is False:
            raise OutOfStockError(product_id)
        price = product.current_price
        if price is None or price <= ZERO:
            raise NoPriceSetError(product_id)
        return ProductPrice(
            product_id=product_id,
            price=price,
            original_price=product.base_price,
        )
