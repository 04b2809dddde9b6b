"""Application service: Cancel Order use case.

Records the ``cancelled`` transition *first*, then returns each line's
reserved units to the ledger.  A retried cancel finds the order already
terminal and fails with AlreadyTerminal before touching inventory, so
units are released exactly once.
"""

from __future__ import annotations

import structlog

from cartkeeper.application.dto import OrderDTO, order_to_dto
from cartkeeper.application.order_support import load_order, release_pending
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.order_repository import OrderRepository
from cartkeeper.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = InventoryLedger(inventory_repo)

    def handle(self, order_id: str, owner_id: str | None = None) -> OrderDTO:
        """Cancel an order.

        Args:
            order_id: The order to cancel.
            owner_id: If given, the order must belong to this owner.
        """
        with self._order_repo.locked(order_id):
            order = load_order(self._order_repo, order_id, owner_id)

            order.cancel()
            self._order_repo.save(order)
            logger.info("order.cancelled", order_id=order_id, owner_id=order.owner_id)

            release_pending(order, self._order_repo, self._ledger)

        return order_to_dto(order)
