"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from storefront.application.ports import CartObserver
from storefront.application.show_cart import ShowCartHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import Cart
from storefront.infrastructure.bootstrap import (
    cart_manager,
    checkout_pricing,
    session_provider,
)


class EchoCartObserver(CartObserver):
    """Prints the cart badge count after every change."""

    def cart_changed(self, cart: Cart) -> None:
        click.echo(f"Cart: {cart.line_count} item(s)")


@click.command("show")
def cart_show() -> None:
    """Show the cart with an order summary."""
    dto = ShowCartHandler(cart_manager(), checkout_pricing()).handle()

    if not dto.items:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Product':<24} {'Type':<9} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*61}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.product_type:<9} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*61}")
    click.echo(f"  {f'Subtotal ({dto.line_count} items)':<40} {dto.subtotal:>21}")
    click.echo(f"  {'Shipping':<40} {dto.shipping:>21}")
    click.echo(f"  {'Tax':<40} {'Calculated at checkout':>21}")
    click.echo(f"  {'Estimated Total':<40} {dto.estimated_total:>21}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int, help="Quantity to add.")
def cart_add(product_id: str, quantity: int) -> None:
    """Add a product to the cart."""
    try:
        cart_manager(observer=EchoCartObserver()).add_item(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Added to cart!")


@click.command("update")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity (0 removes).")
def cart_update(product_id: str, quantity: int) -> None:
    """Change the quantity of a cart line."""
    try:
        cart_manager(observer=EchoCartObserver()).update_quantity(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("remove")
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(product_id: str) -> None:
    """Remove a line from the cart."""
    try:
        cart_manager(observer=EchoCartObserver()).remove_item(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Item removed from cart")


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""
    session = session_provider()
    try:
        cart_manager(session, EchoCartObserver()).clear_cart(session.current_identity())
    except DomainException as exc:
        raise click.ClickException(str(exc))
