"""HTTP surface: checkout, cart quotes and the payment webhook."""

from __future__ import annotations

import dataclasses
import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront.application.process_checkout import ProcessCheckoutHandler
from storefront.application.quote_cart import QuoteCartHandler
from storefront.application.record_payment import RecordPaymentHandler
from storefront.domain.exceptions import (
    DomainException,
    PaymentGatewayError,
    PricingRejectedError,
    ValidationError,
    WebhookVerificationError,
)
from storefront.infrastructure import bootstrap
from storefront.infrastructure.config import Settings, load_settings
from storefront.infrastructure.http.schemas import CheckoutPayload, CheckoutResponse
from storefront.infrastructure.remote.webhook import WebhookVerifier

logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront Checkout", version="0.1.0")


# --- Dependencies ---------------------------------------------------------------


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def _checkout_handler(settings: Settings) -> ProcessCheckoutHandler:
    return bootstrap.process_checkout_handler(settings)


@lru_cache
def _quote_handler(settings: Settings) -> QuoteCartHandler:
    return bootstrap.quote_cart_handler(settings)


@lru_cache
def _payment_handler(settings: Settings) -> RecordPaymentHandler:
    return bootstrap.record_payment_handler(settings)


def get_checkout_handler(settings: Settings = Depends(get_settings)) -> ProcessCheckoutHandler:
    return _checkout_handler(settings)


def get_quote_handler(settings: Settings = Depends(get_settings)) -> QuoteCartHandler:
    return _quote_handler(settings)


def get_payment_handler(settings: Settings = Depends(get_settings)) -> RecordPaymentHandler:
    return _payment_handler(settings)


def get_webhook_verifier(settings: Settings = Depends(get_settings)) -> WebhookVerifier:
    return bootstrap.webhook_verifier(settings)


# --- Error mapping --------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    if isinstance(exc, PricingRejectedError):
        status, body = 400, {"error": str(exc), "details": exc.errors}
    elif isinstance(exc, (ValidationError, WebhookVerificationError)):
        status, body = 400, {"error": str(exc)}
    elif isinstance(exc, PaymentGatewayError):
        status = exc.status_code
        body = {"error": str(exc), "details": jsonable_encoder(exc.details)}
    else:
        logger.error("Request failed: %s", exc)
        status, body = 500, {"error": str(exc)}
    return JSONResponse(status_code=status, content=body)


# --- Routes ---------------------------------------------------------------------


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/checkout", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutPayload,
    handler: ProcessCheckoutHandler = Depends(get_checkout_handler),
):
    result = handler.handle(payload.to_request())
    return CheckoutResponse(checkout_url=result.checkout_url, order_id=result.order_id)


@app.post("/checkout/quote")
def quote(
    payload: CheckoutPayload,
    handler: QuoteCartHandler = Depends(get_quote_handler),
):
    return dataclasses.asdict(handler.handle(payload.to_request()))


@app.post("/webhooks/lomi")
async def lomi_webhook(
    request: Request,
    x_lomi_signature: str | None = Header(None, alias="X-lomi-Signature"),
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    handler: RecordPaymentHandler = Depends(get_payment_handler),
):
    """Replay-tolerant: recording the same outcome twice leaves the order unchanged."""
    raw_body = await request.body()
    event = verifier.verify(raw_body, x_lomi_signature)
    outcome = await run_in_threadpool(handler.handle, event)
    if not outcome.handled:
        return {"received": True, "message": "Webhook event type not handled for payment update."}
    return {"received": True, "message": "Webhook processed."}
