"""Application service: Get Cart use case (query with self-healing)."""

from __future__ import annotations

from cartkeeper.application.cart_view import CartHandlerBase
from cartkeeper.application.dto import CartView


class GetCartHandler(CartHandlerBase):

    def handle(self, owner_id: str) -> CartView:
        """Return the owner's cart repriced against the live catalog.

        Lines whose product was deleted from the catalog are removed from
        the stored cart as a side effect.  An owner without a cart gets an
        empty view; nothing is created.
        """
        with self._cart_repo.locked(owner_id):
            return self._render(self._load_or_new(owner_id))
