"""Shared plumbing for the cart use cases.

Every cart handler answers with a CartView built the same way: each line
is repriced from the current catalog price, annotated with the ledger's
live ``available`` count, and lines whose product has left the catalog are
dropped from the view *and* from the stored cart.
"""

from __future__ import annotations

import structlog

from cartkeeper.application.dto import CartLineView, CartView
from cartkeeper.domain.model.cart import Cart
from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.repository.cart_repository import CartRepository
from cartkeeper.domain.repository.inventory_repository import InventoryRepository
from cartkeeper.domain.repository.product_repository import ProductRepository
from cartkeeper.domain.service.inventory_ledger import InventoryLedger
from cartkeeper.domain.service.pricing import (
    DEFAULT_POLICY,
    PricingPolicy,
    compute_totals,
)

logger = structlog.get_logger(__name__)


class CartHandlerBase:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
        pricing_policy: PricingPolicy = DEFAULT_POLICY,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._ledger = InventoryLedger(inventory_repo)
        self._pricing_policy = pricing_policy

    def _render(self, cart: Cart) -> CartView:
        """Reprice, annotate and self-heal *cart*, persisting any change.

        Callers must hold the owner's cart lock.
        """
        lines: list[CartLineView] = []
        priced: list[tuple[Money, int]] = []
        changed = False

        for item in list(cart.items):
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                cart.remove(item.product_id)
                changed = True
                logger.info(
                    "cart.line_dropped",
                    owner_id=cart.owner_id,
                    product_id=item.product_id,
                )
                continue

            if item.unit_price != product.price or item.product_name != product.name:
                item.unit_price = product.price
                item.product_name = product.name
                changed = True

            inventory = self._ledger.find(item.product_id)
            available = inventory.available if inventory is not None else 0
            in_stock = available >= item.quantity
            if in_stock:
                priced.append((product.price, item.quantity))

            lines.append(
                CartLineView(
                    product_id=item.product_id,
                    product_name=product.name,
                    quantity=item.quantity,
                    unit_price=str(product.price),
                    line_total=str(product.price * item.quantity),
                    available=available,
                    in_stock=in_stock,
                    image=item.image,
                    specifications=dict(item.specifications),
                )
            )

        if changed:
            self._cart_repo.put(cart)

        totals = compute_totals(priced, self._pricing_policy)
        return CartView(
            owner_id=cart.owner_id,
            items=lines,
            subtotal=str(totals.subtotal),
            tax=str(totals.tax),
            shipping=str(totals.shipping),
            total=str(totals.total),
        )

    def _load_or_new(self, owner_id: str) -> Cart:
        cart = self._cart_repo.get(owner_id)
        return cart if cart is not None else Cart(owner_id=owner_id)

