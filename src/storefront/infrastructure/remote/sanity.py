"""Catalog and tax settings read from the Sanity query API.

Queries exclude draft documents so only published prices are ever used.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from storefront.domain.exceptions import (
    CatalogUnavailableError,
    DomainException,
    TaxSettingsUnavailableError,
    ValidationError,
)
from storefront.domain.model.product import CatalogProduct
from storefront.domain.model.tax import TaxSettings
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.tax_settings_repository import TaxSettingsRepository
from storefront.infrastructure.documents import (
    catalog_product_from_document,
    tax_settings_from_document,
)

logger = logging.getLogger(__name__)

_PRODUCT_FIELDS = "{ _id, name, currentPrice, basePrice, inStock }"

PRODUCT_BY_ID_QUERY = (
    '*[_type == "products" && _id == $id && !(_id in path("drafts.**"))][0] '
    + _PRODUCT_FIELDS
)

PRODUCTS_BY_IDS_QUERY = (
    '*[_type == "products" && _id in $ids && !(_id in path("drafts.**"))] '
    + _PRODUCT_FIELDS
)

TAX_SETTINGS_QUERY = (
    '*[_type == "shippingAndTaxes" && !(_id in path("drafts.**"))][0] '
    "{ taxSettings { isActive, taxRates[] { name, type, rate } } }"
)


class SanityQueryError(DomainException):
    """A GROQ query could not be executed."""


class SanityClient:
    """Minimal GROQ query client over HTTP."""

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str,
        token: str | None = None,
        use_cdn: bool = False,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        host = "apicdn.sanity.io" if use_cdn else "api.sanity.io"
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        if not token:
            logger.warning("SANITY_READ_TOKEN not set; queries may fail if the dataset is private")
        self._dataset = dataset
        self._client = httpx.Client(
            base_url=f"https://{project_id}.{host}/v{api_version}",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        query_params = {"query": query}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)
        try:
            response = self._client.get(f"/data/query/{self._dataset}", params=query_params)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SanityQueryError(f"Sanity query failed: {exc}") from exc
        if not isinstance(body, dict):
            raise SanityQueryError(
                f"Sanity query returned a {type(body).__name__} instead of an object"
            )
        return body.get("result")


class SanityCatalogRepository(CatalogRepository):

    def __init__(self, client: SanityClient) -> None:
        self._client = client

    def get_by_id(self, product_id: str) -> CatalogProduct | None:
        try:
            doc = self._client.fetch(PRODUCT_BY_ID_QUERY, {"id": product_id})
            return catalog_product_from_document(doc) if doc else None
        except (SanityQueryError, ValidationError) as exc:
            raise CatalogUnavailableError(str(exc)) from exc

    def get_many(self, product_ids: list[str]) -> dict[str, CatalogProduct]:
        if not product_ids:
            return {}
        try:
            docs = self._client.fetch(PRODUCTS_BY_IDS_QUERY, {"ids": product_ids})
            products = [catalog_product_from_document(doc) for doc in docs or []]
        except (SanityQueryError, ValidationError) as exc:
            raise CatalogUnavailableError(str(exc)) from exc
        return {p.id: p for p in products}


class SanityTaxSettingsRepository(TaxSettingsRepository):

    def __init__(self, client: SanityClient) -> None:
        self._client = client

    def get(self) -> TaxSettings | None:
        try:
            return tax_settings_from_document(self._client.fetch(TAX_SETTINGS_QUERY))
        except (SanityQueryError, ValidationError) as exc:
            raise TaxSettingsUnavailableError(str(exc)) from exc
