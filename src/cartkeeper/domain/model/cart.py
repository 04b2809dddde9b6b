"""Cart aggregate: one owner's working set of intended purchases.

The cart holds intent only.  Nothing in here touches inventory; the
application layer checks availability against the ledger before it
calls into the cart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from cartkeeper.domain.exceptions import EntityNotFoundError, ValidationError
from cartkeeper.domain.model.value_objects import Money


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartLineItem:
    """A product the owner intends to buy.

    ``unit_price`` is the price snapshot taken the last time the line was
    added to or re-quantified; views reprice from the catalog on read.
    """

    product_id: str
    product_name: str
    quantity: int
    unit_price: Money
    image: str = ""
    specifications: dict[str, str] = field(default_factory=dict)
    added_at: datetime = field(default_factory=_now)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Aggregate root for a shopping cart, one per owner.

    Invariants:
    - no two line items share a ``product_id``
    - every line item has ``quantity >= 1``
    """

    owner_id: str
    items: list[CartLineItem] = field(default_factory=list)
    updated_at: datetime = field(default_factory=_now)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def quantity_of(self, product_id: str) -> int:
        item = self.find(product_id)
        return item.quantity if item is not None else 0

    def add(
        self,
        product_id: str,
        product_name: str,
        quantity: int,
        unit_price: Money,
        image: str = "",
        specifications: dict[str, str] | None = None,
    ) -> CartLineItem:
        """Add *quantity* units, merging into an existing line if present."""
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")

        item = self.find(product_id)
        if item is None:
            item = CartLineItem(
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=unit_price,
                image=image,
                specifications=dict(specifications or {}),
            )
            self.items.append(item)
        else:
            item.quantity += quantity
            item.product_name = product_name
            item.unit_price = unit_price
            item.image = image
            if specifications:
                item.specifications = dict(specifications)

        self._touch()
        return item

    def set_quantity(self, product_id: str, quantity: int, unit_price: Money) -> None:
        """Replace the absolute quantity of a line.  ``quantity <= 0`` removes it."""
        if quantity <= 0:
            self.remove(product_id)
            return

        item = self.find(product_id)
        if item is None:
            raise EntityNotFoundError(f"Product '{product_id}' is not in the cart")
        item.quantity = quantity
        item.unit_price = unit_price
        self._touch()

    def remove(self, product_id: str) -> bool:
        """Drop the line for *product_id*.  Returns False if it was not there."""
        before = len(self.items)
        self.items = [item for item in self.items if item.product_id != product_id]
        removed = len(self.items) != before
        if removed:
            self._touch()
        return removed

    def clear(self) -> None:
        self.items = []
        self._touch()

    def check_invariants(self) -> None:
        seen: set[str] = set()
        for item in self.items:
            if item.product_id in seen:
                raise ValidationError(
                    f"Duplicate line item for product '{item.product_id}'"
                )
            if item.quantity < 1:
                raise ValidationError(
                    f"Line item for product '{item.product_id}' has quantity {item.quantity}"
                )
            seen.add(item.product_id)

    def _touch(self) -> None:
        self.updated_at = _now()
