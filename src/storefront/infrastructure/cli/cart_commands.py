"""CLI commands for pricing a cart without checking out."""

from __future__ import annotations

import json

import click
from pydantic import ValidationError as PayloadError

from storefront.application.dto import QuoteDTO
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import quote_cart_handler
from storefront.infrastructure.config import load_settings
from storefront.infrastructure.http.schemas import CheckoutPayload


def _load_payload(cart_file, currency: str | None, shipping: str | None) -> CheckoutPayload:
    """Read a cart file: either a bare list of items or a full checkout body."""
    try:
        data = json.load(cart_file)
    except ValueError as exc:
        raise click.BadParameter(f"Cart file is not valid JSON: {exc}", param_hint="--cart")
    if isinstance(data, list):
        data = {"cartItems": data}
    if not isinstance(data, dict):
        raise click.BadParameter("Expected a list of items or an object.", param_hint="--cart")

    if currency is not None:
        data["currencyCode"] = currency
    if shipping is not None:
        data["shippingFee"] = shipping

    try:
        return CheckoutPayload.model_validate(data)
    except PayloadError as exc:
        raise click.BadParameter(str(exc), param_hint="--cart")


def _display_quote(dto: QuoteDTO) -> None:
    click.echo(f"Currency: {dto.currency}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Claimed':>12} {'Validated':>12}")
    click.echo(f"  {'-'*52}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_id:<20} {line.quantity:>5} "
            f"{line.claimed_total:>12} {line.validated_total:>12}"
        )
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Subtotal':<27} {dto.original_subtotal:>25}")
    click.echo(f"  {'Discount':<27} {dto.discount:>25}")
    click.echo(f"  {'Shipping':<27} {dto.shipping_fee:>25}")
    click.echo(f"  {'Tax':<27} {dto.tax:>25}")
    click.echo(f"  {'Total':<27} {dto.total:>25}")

    for warning in dto.warnings:
        click.echo(f"warning: {warning}")
    for error in dto.errors:
        click.echo(f"error: {error}", err=True)


@click.command("quote")
@click.option("--cart", "cart_file", required=True, type=click.File("r"), help="Cart JSON file.")
@click.option("--currency", default=None, help="Currency code (XOF, EUR, USD).")
@click.option("--shipping", default=None, help="Shipping fee in the cart currency.")
def cart_quote(cart_file, currency: str | None, shipping: str | None) -> None:
    """Re-price a cart against the catalog and show the totals."""
    payload = _load_payload(cart_file, currency, shipping)

    try:
        handler = quote_cart_handler(load_settings())
        dto = handler.handle(payload.to_request())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_quote(dto)
    if dto.has_critical_errors:
        raise click.ClickException("Cart cannot be checked out.")
