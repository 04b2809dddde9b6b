"""Application service: Order Summary use case (query).

Counts an owner's orders per status and adds up what they were charged.
Cancelled orders still count towards the amount.
"""

from __future__ import annotations

from cartkeeper.application.dto import OrderSummaryDTO
from cartkeeper.domain.model.order import OrderStatus
from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.repository.order_repository import OrderRepository


class OrderSummaryHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, owner_id: str) -> OrderSummaryDTO:
        orders = self._order_repo.list_by_owner(owner_id)

        amount = Money.zero()
        by_status = {status.value: 0 for status in OrderStatus}
        for order in orders:
            amount = amount + order.total
            by_status[order.status.value] += 1

        return OrderSummaryDTO(
            total_orders=len(orders),
            total_amount=str(amount),
            by_status=by_status,
        )
