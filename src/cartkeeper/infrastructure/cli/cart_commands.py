"""CLI commands for a customer's cart."""

from __future__ import annotations

import click

from cartkeeper.application.add_cart_item import AddCartItemHandler
from cartkeeper.application.clear_cart import ClearCartHandler
from cartkeeper.application.dto import CartView
from cartkeeper.application.get_cart import GetCartHandler
from cartkeeper.application.remove_cart_item import RemoveCartItemHandler
from cartkeeper.application.update_cart_item import UpdateCartItemHandler
from cartkeeper.domain.exceptions import DomainException
from cartkeeper.infrastructure.bootstrap import (
    cart_repository,
    inventory_repository,
    pricing_policy,
    product_repository,
)


def _repos() -> dict:
    return {
        "cart_repo": cart_repository(),
        "product_repo": product_repository(),
        "inventory_repo": inventory_repository(),
        "pricing_policy": pricing_policy(),
    }


def _parse_specs(raw: str | None) -> dict[str, str]:
    """Parse 'size=M,color=red' into a dict."""
    specs: dict[str, str] = {}
    if not raw:
        return specs
    for pair in raw.split(","):
        pair = pair.strip()
        if "=" not in pair:
            raise click.BadParameter(f"Invalid specification '{pair}'. Expected 'key=value'.")
        key, value = pair.split("=", 1)
        specs[key.strip()] = value.strip()
    return specs


def _display_cart(view: CartView) -> None:
    if not view.items:
        click.echo(f"Cart for {view.owner_id} is empty.")
        return

    click.echo(f"Cart for {view.owner_id}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10} {'Avail':>6}")
    click.echo(f"  {'-'*54}")
    for item in view.items:
        flag = "" if item.in_stock else "  (out of stock)"
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} "
            f"{item.line_total:>10} {item.available:>6}{flag}"
        )
    click.echo(f"  {'-'*54}")
    click.echo(f"  {'Subtotal':<27} {view.subtotal:>20}")
    click.echo(f"  {'Tax':<27} {view.tax:>20}")
    click.echo(f"  {'Shipping':<27} {view.shipping:>20}")
    click.echo(f"  {'Total':<27} {view.total:>20}")


owner_option = click.option("--owner", required=True, help="Authenticated owner ID.")


@click.command("show")
@owner_option
def cart_show(owner: str) -> None:
    """Show a cart, repriced against the current catalog."""
    try:
        view = GetCartHandler(**_repos()).handle(owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_cart(view)


@click.command("add")
@owner_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.option("--specs", default=None, help="Specifications as 'key=value,key=value'.")
def cart_add(owner: str, product_id: str, quantity: int, specs: str | None) -> None:
    """Add a product to a cart."""
    specifications = _parse_specs(specs)
    try:
        view = AddCartItemHandler(**_repos()).handle(
            owner, product_id, quantity=quantity, specifications=specifications
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_cart(view)


@click.command("update")
@owner_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
def cart_update(owner: str, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    try:
        view = UpdateCartItemHandler(**_repos()).handle(owner, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_cart(view)


@click.command("remove")
@owner_option
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(owner: str, product_id: str) -> None:
    """Remove a product from a cart."""
    view = RemoveCartItemHandler(**_repos()).handle(owner, product_id)
    _display_cart(view)


@click.command("clear")
@owner_option
def cart_clear(owner: str) -> None:
    """Empty a cart."""
    ClearCartHandler(cart_repo=cart_repository()).handle(owner)
    click.echo(f"Cart for {owner} cleared.")
