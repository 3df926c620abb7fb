"""Abstract order/customer datastore.

The store is only ever appended to by checkout: a customer upsert, one
order header, one row per cart line, then the payment-session details.
Every method raises OrderStoreError on failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from storefront.domain.model.order import Customer, OrderLine, OrderTotals, ShippingAddress
from storefront.domain.model.payment import PaymentStatus


class OrderStore(ABC):

    @abstractmethod
    def upsert_customer(self, customer: Customer) -> str:
        """Create or update a customer by email; return the customer ID."""

    @abstractmethod
    def create_order(
        self,
        customer_id: str,
        totals: OrderTotals,
        shipping_address: ShippingAddress | None = None,
    ) -> str:
        """Insert an order header; return the order ID."""

    @abstractmethod
    def create_order_item(self, order_id: str, line: OrderLine) -> str:
        """Insert one order row; return the item ID."""

    @abstractmethod
    def update_order_payment_session(
        self,
        order_id: str,
        session_id: str,
        checkout_url: str,
        processor_details: dict[str, Any],
    ) -> None:
        """Attach payment-session details (or a failure record) to an order."""

    @abstractmethod
    def record_order_payment(
        self,
        session_id: str,
        status: PaymentStatus,
        total_amount: Decimal,
        currency_code: str,
        event_payload: dict[str, Any],
    ) -> None:
        """Record the provider's final word on a payment session."""
