"""Order aggregate.

An Order is the immutable commitment that a checkout produces from a cart.
Its line items and pricing are snapshots; only the status moves, and every
move is appended to the status history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from cartkeeper.domain.exceptions import AlreadyTerminal, ValidationError
from cartkeeper.domain.model.value_objects import Money, PriceBreakdown, Quantity


class OrderStatus(Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# Forward path of an order; cancellation is handled separately.
_FORWARD = [
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

SHIPPING_METHODS = ("standard", "express", "overnight")
DEFAULT_PAYMENT_METHOD = "cash_on_delivery"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLineItem:
    """Snapshot of a cart line at checkout time.

    Never re-read from the live product afterwards (price lock).
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money
    image: str = ""
    specifications: dict[str, str] = field(default_factory=dict)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusChange:
    status: OrderStatus
    timestamp: datetime
    note: str = ""


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders.  The ``__init__`` stays simple so
    the repository can reconstitute persisted orders without re-validating.
    ``id`` is ``None`` until the repository assigns an order number.
    """

    id: str | None
    owner_id: str
    items: list[OrderLineItem]
    pricing: PriceBreakdown
    shipping_address: dict[str, str]
    payment_method: str = DEFAULT_PAYMENT_METHOD
    shipping_method: str = "standard"
    payment_status: str = "pending"
    status: OrderStatus = OrderStatus.PLACED
    status_history: list[StatusChange] = field(default_factory=list)
    checkout_token: str = ""
    pending_release: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        owner_id: str,
        items: list[OrderLineItem],
        pricing: PriceBreakdown,
        shipping_address: dict[str, str],
        payment_method: str,
        shipping_method: str = "standard",
        checkout_token: str = "",
    ) -> Order:
        """Create a new order in ``placed`` status, enforcing all invariants."""
        if not owner_id:
            raise ValidationError("Order owner is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        product_ids = [item.product_id for item in items]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("Order contains duplicate products")

        if not shipping_address:
            raise ValidationError("Shipping address is required")
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")
        if shipping_method not in SHIPPING_METHODS:
            raise ValidationError(
                f"Unknown shipping method '{shipping_method}' "
                f"(expected one of {', '.join(SHIPPING_METHODS)})"
            )

        order = Order(
            id=None,
            owner_id=owner_id,
            items=list(items),
            pricing=pricing,
            shipping_address=dict(shipping_address),
            payment_method=payment_method.strip(),
            shipping_method=shipping_method,
            checkout_token=checkout_token,
        )
        order._record(OrderStatus.PLACED)
        return order

    # --- State transitions ----------------------------------------------------

    def advance_to(self, target: OrderStatus) -> None:
        """Move one step forward along placed -> confirmed -> shipped -> delivered."""
        self._assert_not_terminal()
        if target == OrderStatus.CANCELLED:
            raise ValidationError("Use cancel() to cancel an order")

        current = _FORWARD.index(self.status)
        if _FORWARD.index(target) != current + 1:
            raise ValidationError(
                f"Cannot move order from {self.status.value} to {target.value}"
            )
        self._record(target)

    def cancel(self) -> None:
        """Transition any non-terminal status to ``cancelled``.

        Marks every line as awaiting release.  The caller returns the
        units to the ledger and calls ``mark_released`` per product.
        """
        self._assert_not_terminal()
        self.pending_release = [item.product_id for item in self.items]
        self._record(OrderStatus.CANCELLED)

    def mark_released(self, product_id: str) -> None:
        self.pending_release = [pid for pid in self.pending_release if pid != product_id]

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.pricing.total

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def find_item(self, product_id: str) -> OrderLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # --- Internal helpers -----------------------------------------------------

    def _assert_not_terminal(self) -> None:
        if self.status.is_terminal:
            raise AlreadyTerminal(self.id or "(unsaved)", self.status.value)

    def _record(self, status: OrderStatus) -> None:
        self.status = status
        self.status_history.append(
            StatusChange(status=status, timestamp=_now(), note=f"Order {status.value}")
        )
