"""Application service: Checkout use case.

The only path that turns cart intent into an inventory commitment.

Runs under the owner's cart lock and is all-or-nothing:

1. Load the cart (EmptyCart if there is nothing in it).
2. Re-validate every line against the catalog and the ledger.
3. Open a journal record, then reserve line by line, journaling each
   success.  Any failure releases what this checkout already reserved.
4. Price the order once with the shared pricing calculator.
5. Persist the order, 6. clear the cart, 7. discard the journal record.

A crash anywhere between 3 and 7 leaves the journal record behind;
RecoverCheckoutsHandler either finishes or compensates it.
"""

from __future__ import annotations

import structlog

from cartkeeper.application.dto import OrderDTO, order_to_dto
from cartkeeper.domain.exceptions import EmptyCart, InsufficientStock, ItemUnavailable
from cartkeeper.domain.model.cart import Cart
from cartkeeper.domain.model.checkout import CheckoutRecord
from cartkeeper.domain.model.order import Order, OrderLineItem
from cartkeeper.domain.model.value_objects import Quantity
from cartkeeper.domain.repository.cart_repository import CartRepository
from cartkeeper.domain.repository.checkout_journal import CheckoutJournal
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.order_repository import OrderRepository
from cartkeeper.domain.repository.product_repository import ProductRepository
from cartkeeper.domain.service.inventory_ledger import InventoryLedger
from cartkeeper.domain.service.pricing import (
    DEFAULT_POLICY,
    PricingPolicy,
    compute_totals,
)

logger = structlog.get_logger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
        order_repo: OrderRepository,
        journal: CheckoutJournal,
        pricing_policy: PricingPolicy = DEFAULT_POLICY,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._order_repo = order_repo
        self._journal = journal
        self._ledger = InventoryLedger(inventory_repo)
        self._pricing_policy = pricing_policy

    def handle(
        self,
        owner_id: str,
        shipping_address: dict[str, str],
        payment_method: str,
        shipping_method: str = "standard",
    ) -> OrderDTO:
        with self._cart_repo.locked(owner_id):
            cart = self._cart_repo.get(owner_id)
            if cart is None or cart.is_empty:
                raise EmptyCart(owner_id)

            line_items = self._snapshot_lines(cart)
            pricing = compute_totals(
                ((item.unit_price, item.quantity.value) for item in line_items),
                self._pricing_policy,
            )

            record = CheckoutRecord.open(owner_id)

            # Validates address, payment and shipping method before anything
            # is reserved.
            order = Order.place(
                owner_id=owner_id,
                items=line_items,
                pricing=pricing,
                shipping_address=shipping_address,
                payment_method=payment_method,
                shipping_method=shipping_method,
                checkout_token=record.token,
            )

            self._journal.save(record)
            logger.info(
                "checkout.started",
                owner_id=owner_id,
                token=record.token,
                lines=len(line_items),
            )

            try:
                for item in line_items:
                    self._ledger.reserve(item.product_id, item.quantity.value)
                    record.record_reservation(item.product_id, item.quantity.value)
                    self._journal.save(record)
                self._order_repo.save(order)
            except Exception:
                self._compensate(record)
                raise

            self._cart_repo.delete(owner_id)
            self._journal.discard(record.token)

        logger.info(
            "checkout.completed",
            owner_id=owner_id,
            order_id=order.id,
            total=str(order.total),
        )
        return order_to_dto(order)

    # --- Steps ----------------------------------------------------------------

    def _snapshot_lines(self, cart: Cart) -> list[OrderLineItem]:
        """Re-validate the cart and copy it into order line items.

        Prices come from the catalog *now*, not from the cart snapshot.
        """
        line_items: list[OrderLineItem] = []
        for line in cart.items:
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                raise ItemUnavailable(line.product_id)

            inventory = self._ledger.find(line.product_id)
            available = inventory.available if inventory is not None else 0
            if line.quantity > available:
                raise InsufficientStock(line.product_id, line.quantity, available)

            line_items.append(
                OrderLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=Quantity(line.quantity),
                    unit_price=product.price,
                    image=product.image or line.image,
                    specifications=dict(line.specifications),
                )
            )
        return line_items

    def _compensate(self, record: CheckoutRecord) -> None:
        """Release everything this checkout reserved, then drop its record.

        If a release itself fails the record is kept, trimmed to what is
        still outstanding, so recovery can finish the job.
        """
        outstanding = dict(record.reservations)
        attempted = len(outstanding)
        for product_id, quantity in record.reservations.items():
            try:
                self._ledger.release(product_id, quantity)
            except Exception:
                logger.exception(
                    "checkout.compensation_failed",
                    token=record.token,
                    product_id=product_id,
                    quantity=quantity,
                )
                continue
            del outstanding[product_id]

        if outstanding:
            record.reservations = outstanding
            self._journal.save(record)
        else:
            self._journal.discard(record.token)

        logger.warning(
            "checkout.compensated",
            owner_id=record.owner_id,
            token=record.token,
            released=attempted - len(outstanding),
            outstanding=len(outstanding),
        )
