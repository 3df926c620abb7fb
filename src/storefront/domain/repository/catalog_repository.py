"""Abstract read access to the product catalog.

Defined in the domain layer so the domain never depends on the CMS.
Concrete readers (JSON file, Sanity query API) live in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import CatalogProduct


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> CatalogProduct | None:
        """Return a published product by its ID, or None if not found."""

    @abstractmethod
    def get_many(self, product_ids: list[str]) -> dict[str, CatalogProduct]:
        """Return every published product among *product_ids*, keyed by ID.

        IDs that match nothing are simply absent from the result.
        Raises CatalogUnavailableError if the catalog cannot be queried.
        """
