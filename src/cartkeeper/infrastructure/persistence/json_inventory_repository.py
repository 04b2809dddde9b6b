"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

from pathlib import Path

from cartkeeper.domain.exceptions import ConcurrentUpdate
from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.infrastructure.persistence.file_locks import FileKeyedLocks
from cartkeeper.infrastructure.persistence.json_file import JsonFile


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        super().__init__(FileKeyedLocks(file_path.parent / "locks", "inventory"))
        self._file = JsonFile(file_path)

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        for raw in self._file.load():
            if raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryItem]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, item: InventoryItem) -> None:
        item.check_invariants()
        with self._file.editing() as records:
            for i, raw in enumerate(records):
                if raw["product_id"] == item.product_id:
                    stored = raw.get("version", 0)
                    if stored != item.version - 1:
                        raise ConcurrentUpdate(
                            "Inventory", item.product_id, item.version - 1, stored
                        )
                    records[i] = self._to_raw(item)
                    break
            else:
                records.append(self._to_raw(item))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "stock": item.stock,
            "reserved": item.reserved,
            "version": item.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            stock=raw["stock"],
            reserved=raw.get("reserved", 0),
            version=raw.get("version", 0),
        )
