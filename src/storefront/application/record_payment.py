"""Application service: Record Payment use case.

Applies a verified payment-provider event to the order store. Only
success and failure events change anything; every other event type is
acknowledged and ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.application.dto import PaymentRecordDTO
from storefront.domain.model.payment import PaymentEvent
from storefront.domain.repository.order_store import OrderStore

logger = logging.getLogger(__name__)


class RecordPaymentHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, payload: dict[str, Any]) -> PaymentRecordDTO:
        event = PaymentEvent.from_payload(payload)
        status = event.status

        if status is None:
            logger.info(
                "Payment event %s for order %s not handled", event.event_type, event.order_id
            )
            return PaymentRecordDTO(
                handled=False, order_id=event.order_id, event_type=event.event_type
            )

        self._order_store.record_order_payment(
            session_id=event.session_id,
            status=status,
            total_amount=event.amount,
            currency_code=event.currency_code,
            event_payload=event.payload,
        )
        logger.info("Payment for order %s recorded as %s", event.order_id, status.value)
        return PaymentRecordDTO(
            handled=True,
            order_id=event.order_id,
            event_type=event.event_type,
            status=status.value,
        )
