"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON and remote
collaborators but keep everything in memory. Each one records the calls
it receives so tests can assert on what was (or was not) invoked.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from storefront.domain.exceptions import (
    CatalogUnavailableError,
    OrderStoreError,
    PaymentGatewayError,
)
from storefront.domain.model.order import Customer, OrderLine, OrderTotals, ShippingAddress
from storefront.domain.model.payment import (
    CheckoutSession,
    CheckoutSessionRequest,
    PaymentStatus,
)
from storefront.domain.model.product import CatalogProduct
from storefront.domain.model.tax import TaxSettings
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_store import OrderStore
from storefront.domain.repository.payment_gateway import PaymentGateway
from storefront.domain.repository.tax_settings_repository import TaxSettingsRepository


def product(
    product_id: str,
    current_price: str | None,
    base_price: str | None = None,
    in_stock: bool | None = True,
) -> CatalogProduct:
    return CatalogProduct(
        id=product_id,
        name=product_id.title(),
        current_price=None if current_price is None else Decimal(current_price),
        base_price=None if base_price is None else Decimal(base_price),
        in_stock=in_stock,
    )


class FakeCatalogRepository(CatalogRepository):

    def __init__(self, products: list[CatalogProduct] | None = None) -> None:
        self._store: dict[str, CatalogProduct] = {}
        for p in products or []:
            self._store[p.id] = p
        self.get_many_calls: list[list[str]] = []
        self.unavailable = False

    def get_by_id(self, product_id: str) -> CatalogProduct | None:
        return self._store.get(product_id)

    def get_many(self, product_ids: list[str]) -> dict[str, CatalogProduct]:
        self.get_many_calls.append(list(product_ids))
        if self.unavailable:
            raise CatalogUnavailableError("Catalog query failed")
        return {pid: self._store[pid] for pid in product_ids if pid in self._store}


class FakeTaxSettingsRepository(TaxSettingsRepository):

    def __init__(self, settings: TaxSettings | None = None, error: Exception | None = None) -> None:
        self._settings = settings
        self._error = error

    def get(self) -> TaxSettings | None:
        if self._error is not None:
            raise self._error
        return self._settings


class FakeOrderStore(OrderStore):

    def __init__(self) -> None:
        self.customers: list[Customer] = []
        self.orders: dict[str, dict[str, Any]] = {}
        self.items: list[tuple[str, OrderLine]] = []
        self.sessions: list[tuple[str, str, str, dict[str, Any]]] = []
        self.payments: list[dict[str, Any]] = []
        self.fail_on: set[str] = set()
        self.session_error: str | None = None

    def upsert_customer(self, customer: Customer) -> str:
        self._maybe_fail("upsert_customer")
        self.customers.append(customer)
        return f"cust-{len(self.customers)}"

    def create_order(
        self,
        customer_id: str,
        totals: OrderTotals,
        shipping_address: ShippingAddress | None = None,
    ) -> str:
        self._maybe_fail("create_order")
        order_id = f"order-{len(self.orders) + 1}"
        self.orders[order_id] = {
            "customer_id": customer_id,
            "totals": totals,
            "shipping_address": shipping_address,
        }
        return order_id

    def create_order_item(self, order_id: str, line: OrderLine) -> str:
        self._maybe_fail("create_order_item")
        self.items.append((order_id, line))
        return f"item-{len(self.items)}"

    def update_order_payment_session(
        self,
        order_id: str,
        session_id: str,
        checkout_url: str,
        processor_details: dict[str, Any],
    ) -> None:
        self.sessions.append((order_id, session_id, checkout_url, processor_details))
        if self.session_error is not None:
            raise OrderStoreError(self.session_error)

    def record_order_payment(
        self,
        session_id: str,
        status: PaymentStatus,
        total_amount: Decimal,
        currency_code: str,
        event_payload: dict[str, Any],
    ) -> None:
        self.payments.append(
            {
                "session_id": session_id,
                "status": status,
                "total_amount": total_amount,
                "currency_code": currency_code,
                "event_payload": event_payload,
            }
        )

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise OrderStoreError(f"Error in {operation}: datastore unavailable")


class FakePaymentGateway(PaymentGateway):

    def __init__(self, error: PaymentGatewayError | None = None) -> None:
        self.requests: list[CheckoutSessionRequest] = []
        self._error = error

    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return CheckoutSession(
            session_id=f"cs_{len(self.requests)}",
            checkout_url=f"https://checkout.example/cs_{len(self.requests)}",
            request_payload={"amount": float(request.amount)},
            response_payload={"checkout_session_id": f"cs_{len(self.requests)}"},
        )
