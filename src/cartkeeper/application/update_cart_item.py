"""Application service: Update Cart Item use case.

Sets the *absolute* quantity of a line.  Zero or negative quantities
remove the line instead of failing.
"""

from __future__ import annotations

from cartkeeper.application.cart_view import CartHandlerBase
from cartkeeper.application.dto import CartView
from cartkeeper.domain.exceptions import EntityNotFoundError, InsufficientStock


class UpdateCartItemHandler(CartHandlerBase):

    def handle(self, owner_id: str, product_id: str, quantity: int) -> CartView:
        with self._cart_repo.locked(owner_id):
            cart = self._load_or_new(owner_id)

            if quantity <= 0:
                if cart.remove(product_id):
                    self._cart_repo.put(cart)
                return self._render(cart)

            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if cart.find(product_id) is None:
                raise EntityNotFoundError(f"Product '{product_id}' is not in the cart")

            if not self._ledger.check_available(product_id, quantity):
                inventory = self._ledger.find(product_id)
                available = inventory.available if inventory is not None else 0
                raise InsufficientStock(product_id, quantity, available)

            cart.set_quantity(product_id, quantity, product.price)
            cart.check_invariants()
            self._cart_repo.put(cart)
            return self._render(cart)
