"""Application service: Clear Cart use case."""

from __future__ import annotations

from cartkeeper.domain.repository.cart_repository import CartRepository


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, owner_id: str) -> None:
        with self._cart_repo.locked(owner_id):
            self._cart_repo.delete(owner_id)
