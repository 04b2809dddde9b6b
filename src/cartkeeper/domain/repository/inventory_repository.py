"""Abstract repository for InventoryItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.repository.locking import LockingRepository


class InventoryRepository(LockingRepository, ABC):
    """Inventory store.  ``locked(product_id)`` serializes one product's counters."""

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        """Return the inventory record for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory record."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated inventory record.

        Raises ConcurrentUpdate if the stored record is no longer the one
        *item* was read from.
        """
