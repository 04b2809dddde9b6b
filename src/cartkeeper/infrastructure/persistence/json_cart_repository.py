"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from cartkeeper.domain.model.cart import Cart, CartLineItem
from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.repository.cart_repository import CartRepository
from cartkeeper.infrastructure.persistence.file_locks import FileKeyedLocks
from cartkeeper.infrastructure.persistence.json_file import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        super().__init__(FileKeyedLocks(file_path.parent / "locks", "cart"))
        self._file = JsonFile(file_path)

    # --- CartRepository interface ---------------------------------------------

    def get(self, owner_id: str) -> Cart | None:
        for raw in self._file.load():
            if raw["owner_id"] == owner_id:
                return self._to_domain(raw)
        return None

    def put(self, cart: Cart) -> None:
        self._file.upsert(self._to_raw(cart), key="owner_id")

    def delete(self, owner_id: str) -> None:
        self._file.remove_where(lambda raw: raw["owner_id"] == owner_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "owner_id": cart.owner_id,
            "updated_at": cart.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "image": item.image,
                    "specifications": item.specifications,
                    "added_at": item.added_at.isoformat(),
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        items = [
            CartLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                image=i.get("image", ""),
                specifications=i.get("specifications", {}),
                added_at=datetime.fromisoformat(i["added_at"]),
            )
            for i in raw["items"]
        ]
        return Cart(
            owner_id=raw["owner_id"],
            items=items,
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
