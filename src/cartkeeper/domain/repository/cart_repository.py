"""Abstract repository for Cart aggregate.

Replaces a process-wide map keyed by user with an injectable store.
``locked(owner_id)`` is the per-owner single-writer discipline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cartkeeper.domain.model.cart import Cart
from cartkeeper.domain.repository.locking import LockingRepository


class CartRepository(LockingRepository, ABC):

    @abstractmethod
    def get(self, owner_id: str) -> Cart | None:
        """Return the owner's cart, or None if they never added anything."""

    @abstractmethod
    def put(self, cart: Cart) -> None:
        """Persist the cart under its owner."""

    @abstractmethod
    def delete(self, owner_id: str) -> None:
        """Forget the owner's cart.  No-op if absent."""
