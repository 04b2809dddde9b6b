"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from cartkeeper.application.add_product import AddProductHandler
from cartkeeper.application.list_products import ListProductsHandler
from cartkeeper.application.remove_product import RemoveProductHandler
from cartkeeper.application.set_inventory import SetInventoryHandler
from cartkeeper.application.update_product import UpdateProductHandler
from cartkeeper.domain.exceptions import DomainException
from cartkeeper.infrastructure.bootstrap import inventory_repository, product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--image", default="", help="Image URL or path.")
@click.option("--stock", type=int, default=None, help="Initial units in stock.")
def product_add(name: str, price: str, image: str, stock: int | None) -> None:
    """Add a new product to the catalog."""
    try:
        product = AddProductHandler(product_repo=product_repository()).handle(
            name=name, price=price, image=image
        )
        if stock is not None:
            SetInventoryHandler(
                inventory_repo=inventory_repository(),
                product_repo=product_repository(),
            ).handle(product_id=product.id, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    suffix = f" with {stock} in stock" if stock is not None else ""
    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}{suffix}")


@click.command("list")
@click.option("--in-stock", is_flag=True, help="Only products that can be bought now.")
def product_list(in_stock: bool) -> None:
    """List the catalog with live availability."""
    listing = ListProductsHandler(
        product_repo=product_repository(),
        inventory_repo=inventory_repository(),
    ).handle(in_stock_only=in_stock)

    if not listing:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Available':>10}")
    click.echo("-" * 49)
    for entry in listing:
        click.echo(f"{entry.id:<6} {entry.name:<20} {entry.price:>10} {entry.available:>10}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--name", default=None, help="New name.")
@click.option("--image", default=None, help="New image URL or path.")
def product_update(
    product_id: str,
    price: str | None,
    name: str | None,
    image: str | None,
) -> None:
    """Change a product's price, name or image."""
    try:
        product = UpdateProductHandler(product_repo=product_repository()).handle(
            product_id, price=price, name=name, image=image
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} is now '{product.name}' at {product.price}")


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_remove(product_id: str) -> None:
    """Remove a product from the catalog (its inventory record is kept)."""
    try:
        RemoveProductHandler(product_repo=product_repository()).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} removed from the catalog")
