"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cartkeeper.domain.model.order import Order
from cartkeeper.domain.repository.locking import LockingRepository


class OrderRepository(LockingRepository, ABC):
    """Order store.  ``save`` assigns the order number, e.g. ``WM-2026-000042``, on first save."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its number, or None if not found."""

    @abstractmethod
    def get_by_checkout_token(self, token: str) -> Order | None:
        """Return the order produced by a checkout batch, or None."""

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Order]:
        """Return the owner's orders, newest first."""

    @abstractmethod
    def list_pending_release(self) -> list[Order]:
        """Return cancelled orders whose inventory has not been fully released."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
