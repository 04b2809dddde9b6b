"""Helpers shared by the order use cases."""

from __future__ import annotations

import structlog

from cartkeeper.domain.exceptions import EntityNotFoundError
from cartkeeper.domain.model.order import Order
from cartkeeper.domain.repository.order_repository import OrderRepository
from cartkeeper.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


def load_order(
    order_repo: OrderRepository,
    order_id: str,
    owner_id: str | None = None,
) -> Order:
    """Fetch an order, optionally checking it belongs to *owner_id*.

    A foreign order is reported as not found so its existence is not leaked.
    """
    order = order_repo.get_by_id(order_id)
    if order is None or (owner_id is not None and order.owner_id != owner_id):
        raise EntityNotFoundError(f"Order {order_id} not found")
    return order


def release_pending(
    order: Order,
    order_repo: OrderRepository,
    ledger: InventoryLedger,
) -> int:
    """Return the reserved units of a cancelled order to the ledger.

    Each product is released once and then struck off
    ``order.pending_release`` with the order saved immediately, so an
    interrupted pass can be resumed without releasing anything twice.
    Callers must hold the order's lock.  Returns the units released.
    """
    total = 0
    for product_id in list(order.pending_release):
        item = order.find_item(product_id)
        if item is not None:
            total += ledger.release(product_id, item.quantity.value)
        order.mark_released(product_id)
        order_repo.save(order)

    logger.info("order.inventory_released", order_id=order.id, units=total)
    return total
