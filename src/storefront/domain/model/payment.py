"""Payment-session requests and provider events."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Currency, to_decimal


@dataclass(frozen=True)
class PaymentLineItem:
    name: str
    unit_amount: Decimal
    quantity: int
    currency: Currency
    images: tuple[str, ...] = ()
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def amount(self) -> Decimal:
        return self.unit_amount * self.quantity


@dataclass(frozen=True)
class CheckoutSessionRequest:
    """Everything the payment provider needs to open a hosted checkout."""

    success_url: str
    cancel_url: str
    currency: Currency
    customer_name: str
    customer_email: str
    line_items: tuple[PaymentLineItem, ...]
    metadata: dict[str, Any]
    title: str
    description: str
    customer_phone: str | None = None
    allow_coupon_code: bool = True
    allow_quantity: bool = False

    @property
    def amount(self) -> Decimal:
        return sum((line.amount for line in self.line_items), Decimal("0"))


@dataclass(frozen=True)
class CheckoutSession:
    """An opened session plus the exchange that produced it, for auditing."""

    session_id: str
    checkout_url: str
    request_payload: dict[str, Any] = field(default_factory=dict)
    response_payload: dict[str, Any] = field(default_factory=dict)


class PaymentStatus(Enum):
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"


@dataclass(frozen=True)
class PaymentEvent:
    """A verified provider event, reduced to the fields we act on."""

    event_type: str
    order_id: str
    session_id: str
    amount: Decimal
    currency_code: str
    payload: dict[str, Any]

    @property
    def status(self) -> PaymentStatus | None:
        return _EVENT_STATUS.get(self.event_type)

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> PaymentEvent:
        """Build an event from a verified webhook body.

        The provider is loose about field names, so several fallbacks are
        tried for the session id, the amount and the currency.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Webhook payload must be a JSON object")
        event_type = payload.get("event")
        data = payload.get("data")
        if not event_type or not isinstance(data, dict):
            raise ValidationError("Event type or data missing.")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValidationError("Webhook metadata must be a JSON object.")
        order_id = metadata.get("internal_order_id")
        if not order_id:
            raise ValidationError(
                "Missing internal_order_id in webhook metadata."
            )

        session_id = (
            data.get("checkout_session_id")
            or metadata.get("checkout_session_id")
            or metadata.get("linkId")
            or data.get("id")
            or ""
        )
        amount = (
            data.get("gross_amount") or data.get("amount") or data.get("net_amount") or "0"
        )
        currency_code = data.get("currency_code") or data.get("currency") or Currency.base().value

        return PaymentEvent(
            event_type=str(event_type),
            order_id=str(order_id),
            session_id=str(session_id),
            amount=to_decimal(amount),
            currency_code=str(currency_code),
            payload=payload,
        )


_EVENT_STATUS = {
    "PAYMENT_SUCCEEDED": PaymentStatus.PAID,
    "PAYMENT_FAILED": PaymentStatus.PAYMENT_FAILED,
}
