"""Signature check for payment-provider webhook deliveries."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

from storefront.domain.exceptions import ConfigurationError, WebhookVerificationError


class WebhookVerifier:
    """HMAC-SHA256 (hex) over the raw request body."""

    def __init__(self, secret: str | None) -> None:
        self._secret = secret

    def verify(self, raw_body: bytes, signature: str | None) -> dict[str, Any]:
        """Return the parsed body if *signature* matches, else raise."""
        if not self._secret:
            raise ConfigurationError("Webhook secret not configured")
        if not signature:
            raise WebhookVerificationError("Missing lomi. signature header (X-lomi-Signature).")

        expected = hmac.new(self._secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            raise WebhookVerificationError("lomi. webhook signature mismatch.")

        try:
            return json.loads(raw_body.decode("utf-8"))
        except ValueError as exc:
            raise WebhookVerificationError("Webhook body is not valid JSON") from exc
