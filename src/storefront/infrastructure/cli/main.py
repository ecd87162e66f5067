import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_list,
    order_place,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_categories,
    product_delete,
    product_list,
    product_update,
)
from storefront.infrastructure.cli.session_commands import (
    session_login,
    session_logout,
    session_whoami,
)
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Storefront — cart, checkout and order history"""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@cli.group()
def session() -> None:
    """Sign in and out."""


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def order() -> None:
    """Place and track orders."""


@cli.group()
def product() -> None:
    """Manage the catalog."""


# Register subcommands
session.add_command(session_login)
session.add_command(session_logout)
session.add_command(session_whoami)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_categories)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_update)
