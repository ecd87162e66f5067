"""CLI commands for checkout and order history."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, ShippingInfoSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.infrastructure.bootstrap import (
    order_repository,
    place_order_handler,
    session_provider,
)
from storefront.infrastructure.cli.cart_commands import EchoCartObserver


@click.command("place")
@click.option("--full-name", required=True, help="Recipient name.")
@click.option("--email", required=True, help="Contact email.")
@click.option("--phone", required=True, help="Contact phone.")
@click.option("--address", required=True, help="Street address.")
@click.option("--city", required=True, help="City.")
@click.option("--state", default="", help="State or region.")
@click.option("--zip", "zip_code", required=True, help="Postal code.")
@click.option("--country", required=True, help="Country.")
def order_place(
    full_name: str,
    email: str,
    phone: str,
    address: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
) -> None:
    """Place an order for the current cart (cash on delivery)."""
    shipping = ShippingInfoSpec(
        full_name=full_name,
        email=email,
        phone=phone,
        address=address,
        city=city,
        zip=zip_code,
        country=country,
        state=state,
    )

    try:
        order_id = place_order_handler(EchoCartObserver()).handle(shipping)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Order placed successfully!")
    click.echo(f"Order ID: {order_id}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.reference}  (status={dto.status})")
    click.echo(f"Order ID: {dto.order_id}")
    click.echo(f"Placed:   {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>21}")
    click.echo(f"  {'Shipping':<30} {dto.shipping:>21}")
    click.echo(f"  {'Total':<30} {dto.total:>21}")
    click.echo()
    click.echo("Ship to:")
    for line in dto.ship_to:
        click.echo(f"  {line}")
    click.echo(f"Payment: {'Cash on Delivery' if dto.payment_method == 'COD' else dto.payment_method}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--all", "all_users", is_flag=True, default=False, help="List every customer's orders.")
def order_list(all_users: bool) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(order_repo=order_repository(), session=session_provider())

    try:
        orders = handler.handle(all_users=all_users)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders yet.")
        return

    click.echo(f"{'Order':<10} {'Placed':<22} {'Status':<12} {'Items':>5} {'Total':>10}")
    click.echo("-" * 63)
    for dto in orders:
        click.echo(
            f"{dto.reference:<10} {dto.created_at:<22} {dto.status:<12} "
            f"{len(dto.items):>5} {dto.total:>10}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--status",
    "new_status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="New status.",
)
def order_status(order_id: str, new_status: str) -> None:
    """Move an order to a new status (admin)."""
    handler = UpdateOrderStatusHandler(order_repo=order_repository())

    try:
        handler.handle(order_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Order status updated!")
