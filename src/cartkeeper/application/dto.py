"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the application layer and whoever drives it
(request handlers, the CLI) without exposing domain internals.  Money is
rendered as display strings, e.g. ``"$15.00"``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cartkeeper.domain.model.order import Order


@dataclass(frozen=True)
class CartLineView:
    """Output: one cart line, repriced and annotated with live availability."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    line_total: str
    available: int
    in_stock: bool
    image: str = ""
    specifications: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CartView:
    """Output: the owner's cart as displayed to the user."""

    owner_id: str
    items: list[CartLineView]
    subtotal: str
    tax: str
    shipping: str
    total: str

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def quantity_of(self, product_id: str) -> int:
        for item in self.items:
            if item.product_id == product_id:
                return item.quantity
        return 0


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    line_total: str
    specifications: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StatusChangeDTO:
    status: str
    timestamp: str
    note: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    owner_id: str
    status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str
    shipping_method: str
    payment_method: str
    payment_status: str
    history: list[StatusChangeDTO]
    created_at: str


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: counts and spend across all of an owner's orders."""

    total_orders: int
    total_amount: str
    by_status: dict[str, int]


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        owner_id=order.owner_id,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                specifications=dict(item.specifications),
            )
            for item in order.items
        ],
        subtotal=str(order.pricing.subtotal),
        tax=str(order.pricing.tax),
        shipping=str(order.pricing.shipping),
        discount=str(order.pricing.discount),
        total=str(order.pricing.total),
        shipping_method=order.shipping_method,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        history=[
            StatusChangeDTO(
                status=change.status.value,
                timestamp=change.timestamp.strftime("%Y-%m-%d %H:%M UTC"),
                note=change.note,
            )
            for change in order.status_history
        ],
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
