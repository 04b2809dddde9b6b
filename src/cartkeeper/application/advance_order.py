"""Application service: Advance Order use case.

Moves an order one step along placed -> confirmed -> shipped -> delivered.
Reserved units stay reserved; cancellation has its own use case because
it must release inventory.
"""

from __future__ import annotations

from cartkeeper.application.dto import OrderDTO, order_to_dto
from cartkeeper.application.order_support import load_order
from cartkeeper.domain.exceptions import ValidationError
from cartkeeper.domain.model.order import OrderStatus
from cartkeeper.domain.repository.order_repository import OrderRepository


class AdvanceOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, status: str) -> OrderDTO:
        try:
            target = OrderStatus(status.lower())
        except ValueError:
            raise ValidationError(f"Unknown order status '{status}'") from None

        with self._order_repo.locked(order_id):
            order = load_order(self._order_repo, order_id)
            order.advance_to(target)
            self._order_repo.save(order)

        return order_to_dto(order)
