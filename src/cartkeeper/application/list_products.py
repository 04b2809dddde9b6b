"""Application service: List Products use case (query).

The catalog as a shopper sees it: each product with its current price and
how many units are free to buy right now.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ProductListingDTO:
    id: str
    name: str
    price: str
    available: int
    image: str = ""


class ListProductsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._inventory_repo = inventory_repo

    def handle(self, in_stock_only: bool = False) -> list[ProductListingDTO]:
        listing = []
        for product in self._product_repo.list_all():
            inventory = self._inventory_repo.get_by_product_id(product.id)
            available = inventory.available if inventory is not None else 0
            if in_stock_only and available == 0:
                continue
            listing.append(
                ProductListingDTO(
                    id=product.id,
                    name=product.name,
                    price=str(product.price),
                    available=available,
                    image=product.image,
                )
            )
        return listing
