"""Composition root - wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. ``STOREFRONT_BACKEND``
picks between local JSON files and the hosted services.
"""

from __future__ import annotations

from storefront.application.process_checkout import ProcessCheckoutHandler
from storefront.application.quote_cart import QuoteCartHandler
from storefront.application.record_payment import RecordPaymentHandler
from storefront.domain.exceptions import ConfigurationError
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_store import OrderStore
from storefront.domain.repository.payment_gateway import PaymentGateway
from storefront.domain.repository.tax_settings_repository import TaxSettingsRepository
from storefront.domain.service.catalog_pricing import CatalogPriceLookup
from storefront.domain.service.currency_converter import CurrencyConverter
from storefront.domain.service.pricing_validator import PricingValidator
from storefront.domain.service.tax_calculator import TaxCalculator
from storefront.domain.service.tax_policy import TaxPolicyResolver
from storefront.infrastructure.config import BACKEND_JSON, BACKEND_REMOTE, Settings
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from storefront.infrastructure.persistence.json_order_store import JsonOrderStore
from storefront.infrastructure.persistence.json_tax_settings_repository import (
    JsonTaxSettingsRepository,
)
from storefront.infrastructure.remote.lomi_gateway import LomiPaymentGateway
from storefront.infrastructure.remote.sanity import (
    SanityCatalogRepository,
    SanityClient,
    SanityTaxSettingsRepository,
)
from storefront.infrastructure.remote.supabase_order_store import SupabaseOrderStore
from storefront.infrastructure.remote.webhook import WebhookVerifier


def _backend(settings: Settings) -> str:
    if settings.backend not in (BACKEND_JSON, BACKEND_REMOTE):
        raise ConfigurationError(f"Unknown STOREFRONT_BACKEND: {settings.backend!r}")
    return settings.backend


# --- Collaborators ------------------------------------------------------------


def sanity_client(settings: Settings) -> SanityClient:
    settings.require("sanity_project_id")
    return SanityClient(
        project_id=settings.sanity_project_id,  # type: ignore[arg-type]
        dataset=settings.sanity_dataset,
        api_version=settings.sanity_api_version,
        token=settings.sanity_read_token,
        timeout=settings.http_timeout_seconds,
    )


def catalog_repository(settings: Settings) -> CatalogRepository:
    if _backend(settings) == BACKEND_REMOTE:
        return SanityCatalogRepository(sanity_client(settings))
    return JsonCatalogRepository(settings.data_dir / "products.json")


def tax_settings_repository(settings: Settings) -> TaxSettingsRepository:
    if _backend(settings) == BACKEND_REMOTE:
        return SanityTaxSettingsRepository(sanity_client(settings))
    return JsonTaxSettingsRepository(settings.data_dir / "settings.json")


def order_store(settings: Settings) -> OrderStore:
    if _backend(settings) == BACKEND_REMOTE:
        settings.require("supabase_url", "supabase_service_role_key")
        return SupabaseOrderStore(
            url=settings.supabase_url,  # type: ignore[arg-type]
            service_role_key=settings.supabase_service_role_key,  # type: ignore[arg-type]
            timeout=settings.http_timeout_seconds,
        )
    return JsonOrderStore(settings.data_dir)


def payment_gateway(settings: Settings) -> PaymentGateway:
    settings.require("lomi_api_key")
    return LomiPaymentGateway(
        api_key=settings.lomi_api_key,  # type: ignore[arg-type]
        base_url=settings.lomi_api_base_url,
        timeout=settings.http_timeout_seconds,
    )


def webhook_verifier(settings: Settings) -> WebhookVerifier:
    return WebhookVerifier(settings.lomi_webhook_secret)


# --- Domain services ----------------------------------------------------------


def currency_converter(settings: Settings) -> CurrencyConverter:
    return CurrencyConverter(settings.rate_table())


def catalog_price_lookup(settings: Settings) -> CatalogPriceLookup:
    return CatalogPriceLookup(catalog_repository(settings))


def tax_policy(settings: Settings) -> TaxPolicyResolver:
    return TaxPolicyResolver(tax_settings_repository(settings))


def pricing_validator(settings: Settings) -> PricingValidator:
    return PricingValidator(catalog_price_lookup(settings), currency_converter(settings))


# --- Use cases ----------------------------------------------------------------


def process_checkout_handler(settings: Settings) -> ProcessCheckoutHandler:
    return ProcessCheckoutHandler(
        pricing_validator=pricing_validator(settings),
        tax_policy=tax_policy(settings),
        tax_calculator=TaxCalculator(currency_converter(settings)),
        order_store=order_store(settings),
        payment_gateway=payment_gateway(settings),
        app_base_url=settings.app_base_url,
    )


def quote_cart_handler(settings: Settings) -> QuoteCartHandler:
    return QuoteCartHandler(
        pricing_validator=pricing_validator(settings),
        tax_policy=tax_policy(settings),
        tax_calculator=TaxCalculator(currency_converter(settings)),
    )


def record_payment_handler(settings: Settings) -> RecordPaymentHandler:
    return RecordPaymentHandler(order_store(settings))
