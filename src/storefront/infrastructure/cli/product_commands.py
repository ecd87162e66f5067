"""CLI commands for the Product aggregate."""

from __future__ import annotations

from pathlib import Path

import click

from storefront.application.list_products import ListCategoriesHandler, ListProductsHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import ProductType
from storefront.infrastructure.bootstrap import (
    add_product_handler,
    delete_product_handler,
    product_repository,
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--discount", default=0, show_default=True, type=click.IntRange(0, 100), help="Discount percent.")
@click.option("--stock", default=0, show_default=True, type=click.IntRange(min=0), help="Units in stock.")
@click.option(
    "--type",
    "product_type",
    default=ProductType.PHYSICAL.value,
    show_default=True,
    type=click.Choice([t.value for t in ProductType]),
)
@click.option("--image", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Image file to upload.")
@click.option("--category", default="", help="Category.")
@click.option("--description", default="", help="Description.")
def product_add(
    name: str,
    price: str,
    discount: int,
    stock: int,
    product_type: str,
    image: Path | None,
    category: str,
    description: str,
) -> None:
    """Add a new product to the catalog."""
    try:
        product = add_product_handler().handle(
            name=name,
            price=price,
            discount=discount,
            stock=stock,
            product_type=product_type,
            image_path=image,
            category=category,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.final_price}")


@click.command("list")
@click.option("--type", "product_type", default=None, type=click.Choice([t.value for t in ProductType]), help="Only this product type.")
@click.option("--category", default=None, help="Only this category.")
@click.option("--search", default="", help="Match name, description or category.")
def product_list(product_type: str | None, category: str | None, search: str) -> None:
    """List catalog products, optionally filtered."""
    handler = ListProductsHandler(product_repo=product_repository())

    try:
        products = handler.handle(product_type=product_type, category=category, search=search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<22} {'Name':<24} {'Type':<9} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 75)
    for p in products:
        stock = str(p.stock) if p.is_physical else "-"
        click.echo(
            f"{p.id:<22} {p.name:<24} {p.product_type.value:<9} {str(p.final_price):>10} {stock:>6}"
        )


@click.command("categories")
def product_categories() -> None:
    """List the categories in use."""
    try:
        categories = ListCategoriesHandler(product_repo=product_repository()).handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not categories:
        click.echo("No categories yet.")
        return
    for name in categories:
        click.echo(name)


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.confirmation_option(prompt="Are you sure you want to delete this product?")
def product_delete(product_id: str) -> None:
    """Delete a product and its stored images."""
    try:
        delete_product_handler().handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Product deleted successfully!")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--discount", default=None, type=click.IntRange(0, 100), help="New discount percent.")
@click.option("--stock", default=None, type=click.IntRange(min=0), help="New stock level.")
def product_update(
    product_id: str, price: str | None, discount: int | None, stock: int | None
) -> None:
    """Update a product's price, discount or stock."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(product_id, new_price=price, discount=discount, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} updated (now {product.final_price})")
