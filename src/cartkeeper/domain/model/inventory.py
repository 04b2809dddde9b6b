"""InventoryItem aggregate: tracks stock and reservations per product.

Each product has one InventoryItem that knows the total physical stock
and how much of it has been reserved by unfulfilled orders.  ``available``
is always derived, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartkeeper.domain.exceptions import InsufficientStock, ValidationError


@dataclass
class InventoryItem:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``stock`` and ``reserved`` are never negative
    - ``reserved`` can never exceed ``stock``, so ``available`` is always >= 0

    ``version`` goes up by one on every mutation.  Durable stores use it to
    reject a save based on a stale read.
    """

    product_id: str
    product_name: str
    stock: int
    reserved: int = 0
    version: int = 0

    @property
    def available(self) -> int:
        return self.stock - self.reserved

    def check_invariants(self) -> None:
        """Raise ValidationError if the counters are inconsistent."""
        if self.stock < 0:
            raise ValidationError(
                f"Stock for {self.product_name} is negative ({self.stock})"
            )
        if self.reserved < 0:
            raise ValidationError(
                f"Reserved count for {self.product_name} is negative ({self.reserved})"
            )
        if self.available < 0:
            raise ValidationError(
                f"Reserved count for {self.product_name} ({self.reserved}) "
                f"exceeds stock ({self.stock})"
            )

    def reserve(self, quantity: int) -> None:
        """Commit *quantity* units to an order.

        Raises InsufficientStock without touching the counters if the
        result would leave ``available`` negative.
        """
        self.check_invariants()
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available:
            raise InsufficientStock(self.product_id, quantity, self.available)
        self.reserved += quantity
        self.version += 1
        self.check_invariants()

    def release(self, quantity: int) -> int:
        """Return up to *quantity* reserved units to available.

        Clamps at zero instead of failing.  Returns the number of units
        actually released.
        """
        self.check_invariants()
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        released = min(quantity, self.reserved)
        self.reserved -= released
        self.version += 1
        self.check_invariants()
        return released

    def restock(self, stock: int) -> None:
        """Set the physical stock level.

        Stock may not drop below what is already committed to orders.
        """
        if stock < 0:
            raise ValidationError("Stock cannot be negative")
        if stock < self.reserved:
            raise ValidationError(
                f"Cannot set stock of {self.product_name} to {stock} "
                f"while {self.reserved} units are reserved"
            )
        self.stock = stock
        self.version += 1
        self.check_invariants()
