"""Abstract hosted-checkout payment provider."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.payment import CheckoutSessionRequest, CheckoutSession


class PaymentGateway(ABC):

    @abstractmethod
    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        """Open a checkout session.

        Raises PaymentResponseError when the provider's answer cannot be
        parsed and PaymentGatewayError for any other refusal.
        """
