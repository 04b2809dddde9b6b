"""Application service: Show Order use case (query)."""

from __future__ import annotations

from cartkeeper.application.dto import OrderDTO, order_to_dto
from cartkeeper.application.order_support import load_order
from cartkeeper.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, owner_id: str | None = None) -> OrderDTO:
        return order_to_dto(load_order(self._order_repo, order_id, owner_id))
