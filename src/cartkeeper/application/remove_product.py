"""Application service: Remove Product use case.

Deletes the product from the catalog only.  Its inventory record stays so
reservations held by existing orders can still be released; carts drop
the product on their next read and checkouts report it as unavailable.
"""

from __future__ import annotations

from cartkeeper.domain.exceptions import EntityNotFoundError
from cartkeeper.domain.repository.product_repository import ProductRepository


class RemoveProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> None:
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        self._product_repo.delete(product_id)
