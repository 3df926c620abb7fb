"""JSON-file-backed implementation of OrderStore.

Keeps customers, order headers and order rows in three files under one
directory. Meant for local runs and the CLI; it mirrors the behaviour of
the hosted stored procedures closely enough to exercise checkout end to
end.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from storefront.domain.exceptions import OrderStoreError
from storefront.domain.model.order import Customer, OrderLine, OrderTotals, ShippingAddress
from storefront.domain.model.payment import PaymentStatus
from storefront.domain.repository.order_store import OrderStore
from storefront.infrastructure.jsonable import jsonable


class JsonOrderStore(OrderStore):

    def __init__(self, data_dir: Path) -> None:
        self._customers_path = data_dir / "customers.json"
        self._orders_path = data_dir / "orders.json"
        self._items_path = data_dir / "order_items.json"
        for path in (self._customers_path, self._orders_path, self._items_path):
            self._ensure_file(path)

    # --- OrderStore interface -------------------------------------------------

    def upsert_customer(self, customer: Customer) -> str:
        customers = self._load_raw(self._customers_path)
        email = customer.email.strip().lower()

        # Upsert: replace if exists, otherwise append
        for raw in customers:
            if raw["email"] == email:
                raw.update(self._customer_to_raw(customer, raw["id"]))
                self._persist_raw(self._customers_path, customers)
                return raw["id"]

        customer_id = self._next_id(customers)
        customers.append(self._customer_to_raw(customer, customer_id))
        self._persist_raw(self._customers_path, customers)
        return customer_id

    def create_order(
        self,
        customer_id: str,
        totals: OrderTotals,
        shipping_address: ShippingAddress | None = None,
    ) -> str:
        customers = self._load_raw(self._customers_path)
        if not any(c["id"] == customer_id for c in customers):
            raise OrderStoreError(f"Customer {customer_id} does not exist")

        orders = self._load_raw(self._orders_path)
        order_id = self._next_id(orders)
        orders.append(
            {
                "id": order_id,
                "customer_id": customer_id,
                "total_amount": str(totals.total),
                "currency_code": totals.currency.value,
                "shipping_fee": str(totals.shipping_fee),
                "tax_amount": str(totals.tax),
                "discount_amount": str(totals.discount),
                "shipping_address": jsonable(shipping_address)
                if shipping_address
                else None,
                "payment_status": "pending",
                "lomi_session_id": None,
                "lomi_checkout_url": None,
                "payment_processor_details": None,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        self._persist_raw(self._orders_path, orders)
        return order_id

    def create_order_item(self, order_id: str, line: OrderLine) -> str:
        self._find_order(self._load_raw(self._orders_path), order_id)

        items = self._load_raw(self._items_path)
        item_id = self._next_id(items)
        items.append(
            {
                "id": item_id,
                "order_id": order_id,
                "product_id": line.product_id,
                "product_title": line.product_title,
                "product_slug": line.product_slug,
                "variant_id": line.variant_id,
                "variant_title": line.variant_title,
                "quantity": line.quantity,
                "price_per_item": str(line.price_per_item),
                "total_amount": str(line.total_amount),
                "product_image_url": line.product_image_url,
            }
        )
        self._persist_raw(self._items_path, items)
        return item_id

    def update_order_payment_session(
        self,
        order_id: str,
        session_id: str,
        checkout_url: str,
        processor_details: dict[str, Any],
    ) -> None:
        orders = self._load_raw(self._orders_path)
        order = self._find_order(orders, order_id)
        existing = order.get("lomi_session_id")
        if existing and existing != "failed":
            raise OrderStoreError(f"Order {order_id} already has a lomi session ID")
        order["lomi_session_id"] = session_id
        order["lomi_checkout_url"] = checkout_url
        order["payment_processor_details"] = jsonable(processor_details)
        self._persist_raw(self._orders_path, orders)

    def record_order_payment(
        self,
        session_id: str,
        status: PaymentStatus,
        total_amount: Decimal,
        currency_code: str,
        event_payload: dict[str, Any],
    ) -> None:
        orders = self._load_raw(self._orders_path)
        for order in orders:
            if order.get("lomi_session_id") == session_id:
                order["payment_status"] = status.value
                order["paid_amount"] = str(total_amount)
                order["paid_currency_code"] = currency_code
                order["payment_event"] = jsonable(event_payload)
                self._persist_raw(self._orders_path, orders)
                return
        raise OrderStoreError(f"No order found for payment session {session_id}")

    # --- Queries --------------------------------------------------------------

    def get_order(self, order_id: str) -> dict[str, Any] | None:
        for raw in self._load_raw(self._orders_path):
            if raw["id"] == order_id:
                return raw
        return None

    def list_order_items(self, order_id: str) -> list[dict[str, Any]]:
        return [i for i in self._load_raw(self._items_path) if i["order_id"] == order_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _customer_to_raw(customer: Customer, customer_id: str) -> dict[str, Any]:
        return {
            "id": customer_id,
            "name": customer.name,
            "email": customer.email.strip().lower(),
            "phone": customer.phone,
            "whatsapp": customer.whatsapp,
            "organization": customer.organization,
        }

    @staticmethod
    def _find_order(orders: list[dict], order_id: str) -> dict:
        for raw in orders:
            if raw["id"] == order_id:
                return raw
        raise OrderStoreError(f"Order {order_id} does not exist")

    @staticmethod
    def _next_id(records: list[dict]) -> str:
        if not records:
            return "1"
        return str(max(int(r["id"]) for r in records) + 1)

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _load_raw(path: Path) -> list[dict]:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _persist_raw(path: Path, records: list[dict]) -> None:
        path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")

    @staticmethod
    def _ensure_file(path: Path) -> None:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")
