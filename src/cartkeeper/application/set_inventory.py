"""Application service: Set Inventory use case."""

from __future__ import annotations

from cartkeeper.domain.exceptions import EntityNotFoundError, ValidationError
from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.product_repository import ProductRepository


class SetInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo

    def handle(self, product_id: str, stock: int) -> InventoryItem:
        """Set the physical stock level for a product."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        if stock < 0:
            raise ValidationError("Stock cannot be negative")

        with self._inventory_repo.locked(product_id):
            item = self._inventory_repo.get_by_product_id(product_id)
            if item is None:
                item = InventoryItem(
                    product_id=product.id,
                    product_name=product.name,
                    stock=stock,
                )
            else:
                item.product_name = product.name
                item.restock(stock)
            self._inventory_repo.save(item)
        return item
