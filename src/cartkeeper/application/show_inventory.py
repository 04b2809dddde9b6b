"""Application service: Show Inventory use case (query).

Lists the ledger's counters.  Records whose product has been removed
from the catalog are still shown (flagged) because orders placed before
the removal may hold reservations against them.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartkeeper.domain.exceptions import EntityNotFoundError
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    stock: int
    reserved: int
    available: int
    in_catalog: bool


class ShowInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo

    def handle(self, product_id: str | None = None) -> list[InventoryLineDTO]:
        if product_id is not None:
            item = self._inventory_repo.get_by_product_id(product_id)
            if item is None:
                raise EntityNotFoundError(f"No inventory record for product '{product_id}'")
            items = [item]
        else:
            items = sorted(self._inventory_repo.list_all(), key=_id_sort_key)

        catalog_ids = {p.id for p in self._product_repo.list_all()}
        return [
            InventoryLineDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                stock=item.stock,
                reserved=item.reserved,
                available=item.available,
                in_catalog=item.product_id in catalog_ids,
            )
            for item in items
        ]


def _id_sort_key(item) -> tuple[int, str]:
    # Numeric IDs in numeric order, anything else after them.
    return (0, f"{int(item.product_id):012d}") if item.product_id.isdigit() else (1, item.product_id)
