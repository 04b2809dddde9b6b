"""Product aggregate.

The catalog owns name, price and image.  Stock counters live on the
InventoryItem owned by the ledger, so a product can leave the catalog
while reservations against it are still outstanding.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartkeeper.domain.exceptions import ValidationError
from cartkeeper.domain.model.value_objects import Money


@dataclass
class Product:

    id: str
    name: str
    price: Money
    image: str = ""

    def __post_init__(self) -> None:
        self.name = _clean_name(self.name)
        _check_price(self.price)

    def update_price(self, new_price: Money) -> None:
        """Carts pick the new price up on their next read; placed orders keep theirs."""
        _check_price(new_price)
        self.price = new_price

    def rename(self, name: str) -> None:
        self.name = _clean_name(name)

    def change_image(self, image: str) -> None:
        self.image = image.strip()


def _clean_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Product name is required")
    return name.strip()


def _check_price(price: Money) -> None:
    if price.is_zero:
        raise ValidationError("Product price must be greater than zero")
