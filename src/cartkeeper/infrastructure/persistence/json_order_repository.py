"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from cartkeeper.domain.model.order import Order, OrderLineItem, OrderStatus, StatusChange
from cartkeeper.domain.model.value_objects import Money, PriceBreakdown, Quantity
from cartkeeper.domain.repository.order_repository import OrderRepository
from cartkeeper.infrastructure.persistence.file_locks import FileKeyedLocks
from cartkeeper.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path, prefix: str = "WM") -> None:
        super().__init__(FileKeyedLocks(file_path.parent / "locks", "order"))
        self._file = JsonFile(file_path)
        self._prefix = prefix

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_checkout_token(self, token: str) -> Order | None:
        for raw in self._file.load():
            if token and raw.get("checkout_token") == token:
                return self._to_domain(raw)
        return None

    def list_by_owner(self, owner_id: str) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["owner_id"] == owner_id
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def list_pending_release(self) -> list[Order]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw.get("pending_release")
        ]

    def save(self, order: Order) -> None:
        with self._file.editing() as records:
            if order.id is None:
                order.id = self._format_id(self._last_sequence(records) + 1)

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == order.id:
                    records[i] = self._to_raw(order)
                    break
            else:
                records.append(self._to_raw(order))

    @staticmethod
    def _last_sequence(records: list[dict]) -> int:
        return max((int(raw["id"].rsplit("-", 1)[-1]) for raw in records), default=0)

    def _format_id(self, seq: int) -> str:
        year = datetime.now(timezone.utc).year
        return f"{self._prefix}-{year}-{seq:06d}"

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _money_raw(money: Money) -> str:
        return str(money.amount)

    @classmethod
    def _to_raw(cls, order: Order) -> dict:
        pricing = order.pricing
        return {
            "id": order.id,
            "owner_id": order.owner_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "currency": pricing.total.currency,
            "pricing": {
                "subtotal": cls._money_raw(pricing.subtotal),
                "tax": cls._money_raw(pricing.tax),
                "shipping": cls._money_raw(pricing.shipping),
                "discount": cls._money_raw(pricing.discount),
                "total": cls._money_raw(pricing.total),
            },
            "shipping_address": order.shipping_address,
            "shipping_method": order.shipping_method,
            "payment_method": order.payment_method,
            "payment_status": order.payment_status,
            "checkout_token": order.checkout_token,
            "pending_release": list(order.pending_release),
            "status_history": [
                {
                    "status": change.status.value,
                    "timestamp": change.timestamp.isoformat(),
                    "note": change.note,
                }
                for change in order.status_history
            ],
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "image": item.image,
                    "specifications": item.specifications,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", currency)),
                image=i.get("image", ""),
                specifications=i.get("specifications", {}),
            )
            for i in raw["items"]
        ]
        p = raw["pricing"]
        pricing = PriceBreakdown(
            subtotal=Money(Decimal(p["subtotal"]), currency),
            tax=Money(Decimal(p["tax"]), currency),
            shipping=Money(Decimal(p["shipping"]), currency),
            discount=Money(Decimal(p.get("discount", "0")), currency),
            total=Money(Decimal(p["total"]), currency),
        )
        history = [
            StatusChange(
                status=OrderStatus(h["status"]),
                timestamp=datetime.fromisoformat(h["timestamp"]),
                note=h.get("note", ""),
            )
            for h in raw.get("status_history", [])
        ]
        return Order(
            id=raw["id"],
            owner_id=raw["owner_id"],
            items=items,
            pricing=pricing,
            shipping_address=raw.get("shipping_address", {}),
            payment_method=raw.get("payment_method", "cash_on_delivery"),
            shipping_method=raw.get("shipping_method", "standard"),
            payment_status=raw.get("payment_status", "pending"),
            status=OrderStatus(raw["status"]),
            status_history=history,
            checkout_token=raw.get("checkout_token", ""),
            pending_release=list(raw.get("pending_release", [])),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
