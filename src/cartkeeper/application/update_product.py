"""Application service: Update Product use case.

Changes any of price, name and image.  Placed orders keep the snapshot
they took at checkout; carts reprice on their next read.
"""

from __future__ import annotations

import structlog

from cartkeeper.domain.exceptions import EntityNotFoundError, ValidationError
from cartkeeper.domain.model.product import Product
from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        price: str | None = None,
        name: str | None = None,
        image: str | None = None,
    ) -> Product:
        if price is None and name is None and image is None:
            raise ValidationError("Nothing to update")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if price is not None:
            product.update_price(Money.of(price))
        if name is not None:
            clash = self._product_repo.get_by_name(name.strip())
            if clash is not None and clash.id != product.id:
                raise ValidationError(f"Product '{name}' already exists")
            product.rename(name)
        if image is not None:
            product.change_image(image)

        self._product_repo.save(product)
        logger.info(
            "product.updated",
            product_id=product.id,
            name=product.name,
            price=str(product.price),
        )
        return product
