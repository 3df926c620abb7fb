"""CLI commands for tax settings."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.tax import TaxType
from storefront.infrastructure.bootstrap import tax_policy
from storefront.infrastructure.config import load_settings


@click.command("show")
def tax_show() -> None:
    """Show the configured tax rates."""
    try:
        settings = tax_policy(load_settings()).fetch_tax_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if settings is None:
        click.echo("No tax settings found.")
        return

    click.echo(f"Active: {'yes' if settings.is_active else 'no'}")
    applied = settings.applied_rate
    click.echo(f"{'Name':<20} {'Type':<12} {'Rate':>10}")
    click.echo("-" * 44)
    for rate in settings.tax_rates:
        shown = f"{rate.rate * 100}%" if rate.type is TaxType.PERCENTAGE else str(rate.rate)
        marker = "  (applied)" if rate is applied else ""
        click.echo(f"{rate.name:<20} {rate.type.value:<12} {shown:>10}{marker}")
