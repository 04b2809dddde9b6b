"""Application service: Add Cart Item use case.

Checks the ledger's live ``available`` against the *total* quantity the
owner would hold after the add.  Adding never reserves anything.
"""

from __future__ import annotations

import structlog

from cartkeeper.application.cart_view import CartHandlerBase
from cartkeeper.application.dto import CartView
from cartkeeper.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStock,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class AddCartItemHandler(CartHandlerBase):

    def handle(
        self,
        owner_id: str,
        product_id: str,
        quantity: int = 1,
        specifications: dict[str, str] | None = None,
    ) -> CartView:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        with self._cart_repo.locked(owner_id):
            cart = self._load_or_new(owner_id)

            desired = cart.quantity_of(product_id) + quantity
            if not self._ledger.check_available(product_id, desired):
                inventory = self._ledger.find(product_id)
                available = inventory.available if inventory is not None else 0
                raise InsufficientStock(product_id, desired, available)

            cart.add(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
                image=product.image,
                specifications=specifications,
            )
            cart.check_invariants()
            self._cart_repo.put(cart)
            logger.info(
                "cart.item_added",
                owner_id=owner_id,
                product_id=product_id,
                quantity=desired,
            )
            return self._render(cart)
