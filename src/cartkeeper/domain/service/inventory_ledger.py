"""Domain service: Inventory Ledger.

The single source of truth for per-product ``stock`` / ``reserved`` /
``available``.  Every mutation loads, mutates and saves one
InventoryItem while holding that product's lock, so two concurrent
reservations of the last units can never both succeed.  Nothing here
spans products; batching and compensation belong to the checkout.

The lock is per process unless the repository supplies a cross-process
one.  Either way a save made from a stale read is rejected by the store
and the mutation is re-applied to a fresh read, so availability is
always checked against the latest counters.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from cartkeeper.domain.exceptions import ConcurrentUpdate, EntityNotFoundError
from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.repository.inventory_repository import InventoryRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Saves rejected as stale before the conflict is surfaced to the caller.
MAX_ATTEMPTS = 5


class InventoryLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    # --- Queries --------------------------------------------------------------

    def check_available(self, product_id: str, quantity: int) -> bool:
        """True iff the product is stocked and at least *quantity* units are free."""
        item = self.find(product_id)
        if item is None:
            return False
        return item.available >= quantity

    def available(self, product_id: str) -> int:
        return self.snapshot(product_id).available

    def find(self, product_id: str) -> InventoryItem | None:
        return self._inventory_repo.get_by_product_id(product_id)

    def snapshot(self, product_id: str) -> InventoryItem:
        item = self.find(product_id)
        if item is None:
            raise EntityNotFoundError(f"No inventory record for product '{product_id}'")
        return item

    # --- Mutations ------------------------------------------------------------

    def reserve(self, product_id: str, quantity: int) -> None:
        """Commit *quantity* units of one product.

        Raises InsufficientStock (state untouched) or EntityNotFoundError.
        """
        with self._inventory_repo.locked(product_id):
            item, _ = self._apply(product_id, lambda item: item.reserve(quantity))
        logger.info(
            "inventory.reserved",
            product_id=product_id,
            quantity=quantity,
            reserved=item.reserved,
            available=item.available,
        )

    def release(self, product_id: str, quantity: int) -> int:
        """Return up to *quantity* units of one product to available.

        Over-release is clamped and logged, not raised.  Returns the number
        of units actually released.
        """
        with self._inventory_repo.locked(product_id):
            item, released = self._apply(product_id, lambda item: item.release(quantity))

        if released < quantity:
            logger.warning(
                "inventory.release_clamped",
                product_id=product_id,
                requested=quantity,
                released=released,
            )
        else:
            logger.info(
                "inventory.released",
                product_id=product_id,
                quantity=released,
                reserved=item.reserved,
                available=item.available,
            )
        return released

    def _apply(
        self, product_id: str, change: Callable[[InventoryItem], T]
    ) -> tuple[InventoryItem, T]:
        """Read, mutate and save one item, re-reading if another writer got there first."""
        attempt = 1
        while True:
            item = self.snapshot(product_id)
            result = change(item)
            try:
                self._inventory_repo.save(item)
                return item, result
            except ConcurrentUpdate:
                if attempt >= MAX_ATTEMPTS:
                    raise
                logger.info("inventory.write_conflict", product_id=product_id, attempt=attempt)
                attempt += 1
