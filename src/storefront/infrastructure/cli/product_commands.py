"""CLI commands for reading catalog prices."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import Currency
from storefront.infrastructure.bootstrap import catalog_price_lookup, currency_converter
from storefront.infrastructure.config import load_settings


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--currency", default=None, help="Currency code (XOF, EUR, USD).")
def product_price(product_id: str, currency: str | None) -> None:
    """Show the authoritative price of a product."""
    settings = load_settings()

    try:
        target = Currency.parse(currency)
        price = catalog_price_lookup(settings).fetch_price(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    converter = currency_converter(settings)
    click.echo(f"Product {price.product_id}")
    click.echo(f"  Price:     {converter.convert(price.price, target):.2f} {target.value}")
    if price.is_marked_down:
        original = converter.convert(price.original_price, target)
        click.echo(f"  Was:       {original:.2f} {target.value}")
