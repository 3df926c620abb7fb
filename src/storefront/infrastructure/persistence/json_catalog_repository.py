"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import CatalogUnavailableError, ValidationError
from storefront.domain.model.product import CatalogProduct
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.infrastructure.documents import (
    catalog_product_from_document,
    catalog_product_to_document,
)


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> CatalogProduct | None:
        return self._load().get(product_id)

    def get_many(self, product_ids: list[str]) -> dict[str, CatalogProduct]:
        products = self._load()
        return {pid: products[pid] for pid in product_ids if pid in products}

    # --- Local catalog maintenance --------------------------------------------

    def save(self, product: CatalogProduct) -> None:
        products = self._load()
        products[product.id] = product
        self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, CatalogProduct]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValidationError("Catalog file must hold a list of products")
            products = [catalog_product_from_document(item) for item in raw]
        except (OSError, ValueError, ValidationError) as exc:
            raise CatalogUnavailableError(
                f"Could not read catalog file {self._file_path}: {exc}"
            ) from exc
        return {p.id: p for p in products}

    def _persist(self, products: dict[str, CatalogProduct]) -> None:
        raw = [catalog_product_to_document(p) for p in products.values()]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
