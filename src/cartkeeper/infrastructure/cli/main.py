import click

from cartkeeper.infrastructure.bootstrap import settings
from cartkeeper.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from cartkeeper.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from cartkeeper.infrastructure.cli.maintenance_commands import maintenance_recover
from cartkeeper.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_checkout,
    order_list,
    order_show,
    order_summary,
)
from cartkeeper.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_remove,
    product_update,
)
from cartkeeper.infrastructure.config import ConfigurationError
from cartkeeper.infrastructure.logging import configure_logging, reset_context


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """cartkeeper: carts, inventory reservations and orders"""
    try:
        current = settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    configure_logging(level=current.log_level, json=current.log_json)
    reset_context(command=ctx.invoked_subcommand)


@cli.group()
def cart() -> None:
    """Manage carts."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def maintenance() -> None:
    """Operational tasks."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_summary)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_remove)
product.add_command(product_update)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
maintenance.add_command(maintenance_recover)
