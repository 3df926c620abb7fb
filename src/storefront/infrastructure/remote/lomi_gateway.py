"""PaymentGateway backed by the lomi. hosted checkout API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from storefront.domain.exceptions import PaymentGatewayError, PaymentResponseError
from storefront.domain.model.payment import (
    CheckoutSession,
    CheckoutSessionRequest,
    PaymentLineItem,
)
from storefront.domain.repository.payment_gateway import PaymentGateway
from storefront.infrastructure.jsonable import jsonable

logger = logging.getLogger(__name__)


class LomiPaymentGateway(PaymentGateway):

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.lomi.africa",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"x-api-key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        payload = build_session_payload(request)
        try:
            response = self._client.post("/checkout-sessions", json=payload)
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(
                f"Payment provider unreachable: {exc}", details=str(exc)
            ) from exc

        logger.info("lomi. responded %s", response.status_code)
        try:
            data = json.loads(response.text)
        except ValueError:
            logger.error("Unparseable lomi. response: %s", response.text)
            raise PaymentResponseError(
                "Invalid response from payment provider", raw_body=response.text
            ) from None

        session_id = data.get("checkout_session_id") if isinstance(data, dict) else None
        if response.is_error or not session_id:
            error = data.get("error") if isinstance(data, dict) else None
            status_code = 500
            if isinstance(error, dict) and isinstance(error.get("status"), int):
                status_code = error["status"]
            raise PaymentGatewayError(
                "Failed to create lomi. checkout session",
                details=error or data,
                status_code=status_code,
            )

        return CheckoutSession(
            session_id=str(session_id),
            checkout_url=str(data.get("checkout_url") or ""),
            request_payload=payload,
            response_payload=data,
        )


def build_session_payload(request: CheckoutSessionRequest) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success_url": request.success_url,
        "cancel_url": request.cancel_url,
        "amount": request.amount,
        "currency_code": request.currency.value,
        "customer_email": request.customer_email,
        "customer_name": request.customer_name,
        "title": request.title,
        "description": request.description,
        "allow_coupon_code": request.allow_coupon_code,
        "allow_quantity": request.allow_quantity,
        "line_items": [_line_item_payload(line) for line in request.line_items],
        "metadata": request.metadata,
    }
    if request.customer_phone:
        payload["customer_phone"] = request.customer_phone
    return jsonable(payload)


def _line_item_payload(line: PaymentLineItem) -> dict[str, Any]:
    product_data: dict[str, Any] = {"name": line.name, "metadata": dict(line.metadata)}
    if line.images:
        product_data["images"] = list(line.images)
    return {
        "price_data": {
            "currency": line.currency.value,
            "product_data": product_data,
            "unit_amount": line.unit_amount,
        },
        "quantity": line.quantity,
    }
