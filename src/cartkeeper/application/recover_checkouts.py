"""Application service: Recover Checkouts use case.

Run at startup (or from the CLI) to settle work a crashed process left
behind:

- a journal record whose order was persisted: the checkout had succeeded,
  so clear the cart and discard the record;
- a journal record without an order: release the recorded reservations
  and discard the record;
- a cancelled order still listing products awaiting release: finish
  releasing them.

Safe to run any number of times.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cartkeeper.application.order_support import release_pending
from cartkeeper.domain.model.checkout import CheckoutRecord
from cartkeeper.domain.repository.cart_repository import CartRepository
from cartkeeper.domain.repository.checkout_journal import CheckoutJournal
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.order_repository import OrderRepository
from cartkeeper.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RecoveryReport:
    checkouts_completed: int
    checkouts_rolled_back: int
    cancellations_completed: int


class RecoverCheckoutsHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        inventory_repo: InventoryRepository,
        order_repo: OrderRepository,
        journal: CheckoutJournal,
    ) -> None:
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._journal = journal
        self._ledger = InventoryLedger(inventory_repo)

    def handle(self) -> RecoveryReport:
        completed = 0
        rolled_back = 0
        for stale_record in self._journal.list_open():
            with self._cart_repo.locked(stale_record.owner_id):
                # A live checkout may have finished while we waited.
                record = self._journal.get(stale_record.token)
                if record is None:
                    continue
                if self._order_repo.get_by_checkout_token(record.token) is not None:
                    self._cart_repo.delete(record.owner_id)
                    completed += 1
                else:
                    self._roll_back(record)
                    rolled_back += 1
                self._journal.discard(record.token)

        cancellations = 0
        for stale in self._order_repo.list_pending_release():
            order_id: str = stale.id  # type: ignore[assignment]
            with self._order_repo.locked(order_id):
                order = self._order_repo.get_by_id(order_id)
                if order is None or not order.pending_release:
                    continue
                release_pending(order, self._order_repo, self._ledger)
            cancellations += 1

        report = RecoveryReport(
            checkouts_completed=completed,
            checkouts_rolled_back=rolled_back,
            cancellations_completed=cancellations,
        )
        logger.info(
            "recovery.finished",
            checkouts_completed=completed,
            checkouts_rolled_back=rolled_back,
            cancellations_completed=cancellations,
        )
        return report

    def _roll_back(self, record: CheckoutRecord) -> None:
        products = sorted(record.reservations)
        for product_id, quantity in list(record.reservations.items()):
            self._ledger.release(product_id, quantity)
            del record.reservations[product_id]
            self._journal.save(record)
        logger.warning(
            "recovery.checkout_rolled_back",
            owner_id=record.owner_id,
            token=record.token,
            products=products,
        )
