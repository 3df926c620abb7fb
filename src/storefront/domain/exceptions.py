"""Domain-level exceptions.

Every failure the checkout pipeline can report is a subclass of
DomainException so the HTTP and CLI layers can catch them uniformly and
map each kind to a status code or a user-friendly message.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A request is malformed or a business rule was violated."""


class InvalidCurrencyError(ValidationError):
    """The submitted currency code is not one we price in."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConfigurationError(DomainException):
    """A collaborator cannot be built because settings are missing."""


# --- Catalog lookups ----------------------------------------------------------


class CatalogLookupError(DomainException):
    """The catalog could not produce a usable price for a product."""

    def __init__(self, product_id: str, message: str) -> None:
        super().__init__(message)
        self.product_id = product_id


class ProductNotFoundError(CatalogLookupError, EntityNotFoundError):
    def __init__(self, product_id: str) -> None:
        super().__init__(product_id, f"Product {product_id} not found")


class OutOfStockError(CatalogLookupError):
    def __init__(self, product_id: str) -> None:
        super().__init__(product_id, f"Product {product_id} is out of stock")


class NoPriceSetError(CatalogLookupError):
    def __init__(self, product_id: str) -> None:
        super().__init__(product_id, f"Product {product_id} has no price set")


class CatalogUnavailableError(DomainException):
    """The catalog source itself could not be reached or queried."""


class TaxSettingsUnavailableError(DomainException):
    """The tax settings source could not be read."""


# --- Pricing ------------------------------------------------------------------


class PricingRejectedError(DomainException):
    """The cart cannot be priced; checkout must not proceed."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Cart pricing validation failed")
        self.errors = list(errors)


class PricingInvariantError(DomainException):
    """A validated price is missing after validation reported success."""


# --- External collaborators ---------------------------------------------------


class OrderStoreError(DomainException):
    """The order/customer datastore rejected or failed an operation."""


class PaymentGatewayError(DomainException):
    """The payment provider refused to create a checkout session."""

    def __init__(
        self,
        message: str,
        details: object = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.details = details
        self.status_code = status_code


class PaymentResponseError(PaymentGatewayError):
    """The payment provider answered with a body we cannot parse."""

    def __init__(self, message: str, raw_body: str) -> None:
        super().__init__(message, details=raw_body, status_code=502)
        self.raw_body = raw_body


class WebhookVerificationError(DomainException):
    """A webhook delivery failed signature verification."""
