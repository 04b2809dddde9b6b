"""CLI commands for the inventory ledger."""

from __future__ import annotations

import click

from cartkeeper.application.set_inventory import SetInventoryHandler
from cartkeeper.application.show_inventory import ShowInventoryHandler
from cartkeeper.domain.exceptions import DomainException
from cartkeeper.infrastructure.bootstrap import inventory_repository, product_repository


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--stock", required=True, type=int, help="Total units in stock.")
def inventory_set(product_id: str, stock: int) -> None:
    """Set the physical stock of a product (reservations are kept)."""
    try:
        item = SetInventoryHandler(
            inventory_repo=inventory_repository(),
            product_repo=product_repository(),
        ).handle(product_id=product_id, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock for '{item.product_name}' set to {item.stock} "
        f"({item.reserved} reserved, {item.available} available)"
    )


@click.command("show")
@click.option("--product", "product_id", default=None, help="Only this product.")
def inventory_show(product_id: str | None) -> None:
    """Show stock, reserved and available units."""
    try:
        lines = ShowInventoryHandler(
            inventory_repo=inventory_repository(),
            product_repo=product_repository(),
        ).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Stock':>7} {'Reserved':>9} {'Available':>10}")
    click.echo("-" * 56)
    for line in lines:
        marker = "" if line.in_catalog else "  (not in catalog)"
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} "
            f"{line.stock:>7} {line.reserved:>9} {line.available:>10}{marker}"
        )
