"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from cartkeeper.application.advance_order import AdvanceOrderHandler
from cartkeeper.application.cancel_order import CancelOrderHandler
from cartkeeper.application.checkout import CheckoutHandler
from cartkeeper.application.dto import OrderDTO
from cartkeeper.application.list_orders import ListOrdersHandler
from cartkeeper.application.order_summary import OrderSummaryHandler
from cartkeeper.application.show_order import ShowOrderHandler
from cartkeeper.domain.exceptions import DomainException
from cartkeeper.domain.model.order import SHIPPING_METHODS
from cartkeeper.infrastructure.bootstrap import (
    cart_repository,
    checkout_journal,
    inventory_repository,
    order_repository,
    pricing_policy,
    product_repository,
)


def _parse_address(raw: str) -> dict[str, str]:
    """Parse 'fullName=Jane Doe,city=Pune' into a dict."""
    address: dict[str, str] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid address field '{pair}'. Expected 'field=value'."
            )
        key, value = pair.split("=", 1)
        address[key.strip()] = value.strip()
    return address


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Owner:    {dto.owner_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Payment:  {dto.payment_method} ({dto.payment_status})")
    click.echo(f"Shipping: {dto.shipping_method}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'Tax':<27} {dto.tax:>20}")
    click.echo(f"  {'Shipping':<27} {dto.shipping:>20}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")

    click.echo()
    for change in dto.history:
        click.echo(f"  {change.timestamp}  {change.status:<10} {change.note}")


@click.command("checkout")
@click.option("--owner", required=True, help="Authenticated owner ID.")
@click.option("--address", required=True, help="Address as 'field=value,field=value'.")
@click.option("--payment", default="cash_on_delivery", show_default=True, help="Payment method.")
@click.option(
    "--shipping",
    type=click.Choice(SHIPPING_METHODS),
    default="standard",
    show_default=True,
    help="Shipping method.",
)
def order_checkout(owner: str, address: str, payment: str, shipping: str) -> None:
    """Turn a cart into an order (reserves inventory)."""
    handler = CheckoutHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        inventory_repo=inventory_repository(),
        order_repo=order_repository(),
        journal=checkout_journal(),
        pricing_policy=pricing_policy(),
    )

    try:
        dto = handler.handle(
            owner_id=owner,
            shipping_address=_parse_address(address),
            payment_method=payment,
            shipping_method=shipping,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} placed.")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order number to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    try:
        dto = ShowOrderHandler(order_repo=order_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--owner", required=True, help="Owner ID.")
def order_list(owner: str) -> None:
    """List an owner's orders, newest first."""
    orders = ListOrdersHandler(order_repo=order_repository()).handle(owner)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<16} {'Status':<10} {'Items':>6} {'Total':>12}  Created")
    click.echo("-" * 66)
    for dto in orders:
        count = sum(item.quantity for item in dto.items)
        click.echo(f"{dto.id:<16} {dto.status:<10} {count:>6} {dto.total:>12}  {dto.created_at}")


@click.command("summary")
@click.option("--owner", required=True, help="Owner ID.")
def order_summary(owner: str) -> None:
    """Show order counts per status and total spend."""
    summary = OrderSummaryHandler(order_repo=order_repository()).handle(owner)

    click.echo(f"Orders: {summary.total_orders}")
    click.echo(f"Amount: {summary.total_amount}")
    for status, count in summary.by_status.items():
        click.echo(f"  {status:<10} {count:>4}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order number to cancel.")
@click.option("--owner", default=None, help="If given, the order must belong to this owner.")
def order_cancel(order_id: str, owner: str | None) -> None:
    """Cancel an order (releases its reserved inventory)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        inventory_repo=inventory_repository(),
    )

    try:
        handler.handle(order_id, owner_id=owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")


@click.command("advance")
@click.option("--id", "order_id", required=True, help="Order number.")
@click.option(
    "--to",
    "status",
    required=True,
    type=click.Choice(["confirmed", "shipped", "delivered"]),
    help="Next status.",
)
def order_advance(order_id: str, status: str) -> None:
    """Move an order to its next status."""
    try:
        dto = AdvanceOrderHandler(order_repo=order_repository()).handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} is now {dto.status}.")
