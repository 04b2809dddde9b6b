"""CLI commands for operational maintenance."""

from __future__ import annotations

import click

from cartkeeper.application.recover_checkouts import RecoverCheckoutsHandler
from cartkeeper.domain.exceptions import DomainException
from cartkeeper.infrastructure.bootstrap import (
    cart_repository,
    checkout_journal,
    inventory_repository,
    order_repository,
)


@click.command("recover")
def maintenance_recover() -> None:
    """Settle checkouts and cancellations interrupted by a crash."""
    handler = RecoverCheckoutsHandler(
        cart_repo=cart_repository(),
        inventory_repo=inventory_repository(),
        order_repo=order_repository(),
        journal=checkout_journal(),
    )

    try:
        report = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Checkouts completed:     {report.checkouts_completed}")
    click.echo(f"Checkouts rolled back:   {report.checkouts_rolled_back}")
    click.echo(f"Cancellations completed: {report.cancellations_completed}")
