"""Application service: Remove Cart Item use case.  Idempotent."""

from __future__ import annotations

from cartkeeper.application.cart_view import CartHandlerBase
from cartkeeper.application.dto import CartView


class RemoveCartItemHandler(CartHandlerBase):

    def handle(self, owner_id: str, product_id: str) -> CartView:
        with self._cart_repo.locked(owner_id):
            cart = self._load_or_new(owner_id)
            if cart.remove(product_id):
                self._cart_repo.put(cart)
            return self._render(cart)
