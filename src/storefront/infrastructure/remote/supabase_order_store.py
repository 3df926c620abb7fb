"""OrderStore backed by Supabase stored procedures, called over PostgREST."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import httpx

from storefront.domain.exceptions import OrderStoreError
from storefront.domain.model.order import Customer, OrderLine, OrderTotals, ShippingAddress
from storefront.domain.model.payment import PaymentStatus
from storefront.domain.repository.order_store import OrderStore
from storefront.infrastructure.jsonable import jsonable

logger = logging.getLogger(__name__)


class SupabaseOrderStore(OrderStore):

    def __init__(
        self,
        url: str,
        service_role_key: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_role_key,
                "Authorization": f"Bearer {service_role_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    # --- OrderStore interface -------------------------------------------------

    def upsert_customer(self, customer: Customer) -> str:
        customer_id = self._rpc(
            "upsert_customer",
            {
                "p_name": customer.name,
                "p_email": customer.email,
                "p_phone": customer.phone,
                "p_whatsapp": customer.whatsapp,
                "p_organization": customer.organization,
            },
        )
        return self._require_id(customer_id, "customer")

    def create_order(
        self,
        customer_id: str,
        totals: OrderTotals,
        shipping_address: ShippingAddress | None = None,
    ) -> str:
        order_id = self._rpc(
            "create_order",
            {
                "p_customer_id": customer_id,
                "p_total_amount": totals.total,
                "p_currency_code": totals.currency.value,
                "p_shipping_fee": totals.shipping_fee,
                "p_tax_amount": totals.tax,
                "p_discount_amount": totals.discount,
                "p_shipping_address": _address_payload(shipping_address),
            },
        )
        return self._require_id(order_id, "order")

    def create_order_item(self, order_id: str, line: OrderLine) -> str:
        item_id = self._rpc(
            "create_order_item",
            {
                "p_order_id": order_id,
                "p_product_id": line.product_id,
                "p_product_title": line.product_title,
                "p_product_slug": line.product_slug,
                "p_variant_id": line.variant_id,
                "p_variant_title": line.variant_title,
                "p_quantity": line.quantity,
                "p_price_per_item": line.price_per_item,
                "p_total_amount": line.total_amount,
                "p_product_image_url": line.product_image_url,
            },
        )
        return self._require_id(item_id, "order item")

    def update_order_payment_session(
        self,
        order_id: str,
        session_id: str,
        checkout_url: str,
        processor_details: dict[str, Any],
    ) -> None:
        self._rpc(
            "update_order_lomi_session",
            {
                "p_order_id": order_id,
                "p_lomi_session_id": session_id,
                "p_lomi_checkout_url": checkout_url,
                "p_payment_processor_details": processor_details,
            },
        )

    def record_order_payment(
        self,
        session_id: str,
        status: PaymentStatus,
        total_amount: Decimal,
        currency_code: str,
        event_payload: dict[str, Any],
    ) -> None:
        self._rpc(
            "record_order_payment",
            {
                "p_lomi_session_id": session_id,
                "p_payment_status": status.value,
                "p_total_amount": total_amount,
                "p_currency_code": currency_code,
                "p_lomi_event_payload": event_payload,
            },
        )

    # --- RPC helpers ----------------------------------------------------------

    def _rpc(self, function: str, params: dict[str, Any]) -> Any:
        try:
            response = self._client.post(f"/rpc/{function}", json=jsonable(params))
        except httpx.HTTPError as exc:
            logger.error("RPC %s failed: %s", function, exc)
            raise OrderStoreError(f"Error calling {function}: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.error("RPC %s returned %s: %s", function, response.status_code, message)
            raise OrderStoreError(f"Error calling {function}: {message}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise OrderStoreError(f"Error calling {function}: unreadable response") from exc

    @staticmethod
    def _require_id(value: Any, entity: str) -> str:
        if not value:
            raise OrderStoreError(f"Error creating {entity}: No {entity} ID returned")
        return str(value)


def _address_payload(address: ShippingAddress | None) -> dict[str, Any] | None:
    if address is None:
        return None
    return {
        "name": address.name,
        "address": address.address,
        "city": address.city,
        "country": address.country,
        "postalCode": address.postal_code,
        "phone": address.phone,
    }


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body)
    return str(body)
