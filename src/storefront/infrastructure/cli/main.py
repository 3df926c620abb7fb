import logging

import click
import uvicorn

from storefront.infrastructure.cli.cart_commands import cart_quote
from storefront.infrastructure.cli.product_commands import product_price
from storefront.infrastructure.cli.tax_commands import tax_show

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Storefront checkout pricing"""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the checkout HTTP API."""
    uvicorn.run("storefront.infrastructure.http.app:app", host=host, port=port, reload=reload)


@cli.group()
def cart() -> None:
    """Price carts."""


@cli.group()
def product() -> None:
    """Inspect catalog products."""


@cli.group()
def tax() -> None:
    """Inspect tax settings."""


# Register subcommands
cart.add_command(cart_quote)
product.add_command(product_price)
tax.add_command(tax_show)
