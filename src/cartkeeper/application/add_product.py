"""Application service: Add Product use case."""

from __future__ import annotations

import structlog

from cartkeeper.domain.exceptions import ValidationError
from cartkeeper.domain.model.product import Product
from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, price: str, image: str = "") -> Product:
        """Add a product under the next free numeric ID.

        The product has no inventory record yet; until one is set it can
        be browsed but never added to a cart.
        """
        product = Product(
            id=self._next_id(),
            name=name,
            price=Money.of(price),
            image=image.strip(),
        )
        if self._product_repo.get_by_name(product.name) is not None:
            raise ValidationError(f"Product '{product.name}' already exists")

        self._product_repo.save(product)
        logger.info("product.added", product_id=product.id, name=product.name)
        return product

    def _next_id(self) -> str:
        numeric_ids = [int(p.id) for p in self._product_repo.list_all() if p.id.isdigit()]
        return str(max(numeric_ids, default=0) + 1)
