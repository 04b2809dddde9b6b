"""Integration tests for the Checkout use case."""

from types import SimpleNamespace

import pytest

from cartkeeper.application.add_cart_item import AddCartItemHandler
from cartkeeper.application.checkout import CheckoutHandler
from cartkeeper.domain.exceptions import (
    EmptyCart,
    InsufficientStock,
    ItemUnavailable,
    ValidationError,
)
from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.model.order import OrderStatus
from cartkeeper.domain.model.product import Product
from cartkeeper.domain.model.value_objects import Money
from tests.fakes import (
    FailingOrderRepository,
    FakeCartRepository,
    FakeCheckoutJournal,
    FakeInventoryRepository,
    FakeOrderRepository,
    FakeProductRepository,
    InterferingInventoryRepository,
)

ADDRESS = {"fullName": "Alice", "address": "1 Main St", "city": "Pune"}


def _setup(products=None, inventory_repo=None, order_repo=None, stock: int = 5):
    if products is None:
        products = [
            Product(id="1", name="Widget", price=Money.of("15.00")),
            Product(id="2", name="Gadget", price=Money.of("25.00")),
        ]
    if inventory_repo is None:
        inventory_repo = FakeInventoryRepository([
            InventoryItem(product_id=p.id, product_name=p.name, stock=stock) for p in products
        ])
    shop = SimpleNamespace(
        cart_repo=FakeCartRepository(),
        product_repo=FakeProductRepository(products),
        inventory_repo=inventory_repo,
        order_repo=order_repo if order_repo is not None else FakeOrderRepository(),
        journal=FakeCheckoutJournal(),
    )
    shop.add = AddCartItemHandler(shop.cart_repo, shop.product_repo, shop.inventory_repo)
    shop.checkout = CheckoutHandler(
        shop.cart_repo, shop.product_repo, shop.inventory_repo, shop.order_repo, shop.journal,
    )
    return shop


def _reserved(shop, product_id: str) -> int:
    return shop.inventory_repo.get_by_product_id(product_id).reserved


class TestCheckoutHappyPath:

    def test_places_order_and_reserves(self):
        shop = _setup()
        shop.add.handle("alice", "1", 2)
        shop.add.handle("alice", "2", 1)

        dto = shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        assert dto.status == "placed"
        assert dto.subtotal == "$55.00"
        assert dto.tax == "$5.50"
        assert dto.shipping == "$10.00"
        assert dto.total == "$70.50"
        assert [h.status for h in dto.history] == ["placed"]
        assert _reserved(shop, "1") == 2
        assert _reserved(shop, "2") == 1
        assert shop.cart_repo.get("alice") is None
        assert shop.journal.list_open() == []

    def test_order_id_format(self):
        shop = _setup()
        shop.add.handle("alice", "1", 1)
        dto = shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")
        assert dto.id.startswith("WM-")
        assert dto.id.endswith("-000001")

    def test_free_shipping_over_threshold(self):
        shop = _setup()
        shop.add.handle("alice", "2", 5)
        dto = shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")
        assert dto.shipping == "$0.00"
        assert dto.total == "$137.50"

    def test_price_snapshot_taken_at_checkout(self):
        shop = _setup()
        shop.add.handle("alice", "1", 1)
        shop.product_repo.get_by_id("1").update_price(Money.of("18.00"))

        dto = shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")
        assert dto.items[0].unit_price == "$18.00"

        # Later catalog changes leave the order alone.
        shop.product_repo.get_by_id("1").update_price(Money.of("99.00"))
        assert shop.order_repo.get_by_id(dto.id).items[0].unit_price == Money.of("18.00")

    def test_checkout_uses_the_last_units(self):
        shop = _setup(stock=3)
        shop.add.handle("alice", "1", 3)
        shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")
        assert shop.inventory_repo.get_by_product_id("1").available == 0

    def test_shipping_and_payment_method_recorded(self):
        shop = _setup()
        shop.add.handle("alice", "1", 1)
        dto = shop.checkout.handle("alice", ADDRESS, "card", shipping_method="express")

        order = shop.order_repo.get_by_id(dto.id)
        assert order.shipping_method == "express"
        assert order.payment_method == "card"
        assert order.status == OrderStatus.PLACED


class TestCheckoutContention:

    def test_second_buyer_of_the_same_units_fails(self):
        shop = _setup(stock=5)
        shop.add.handle("alice", "1", 3)
        shop.add.handle("bob", "1", 3)

        shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        with pytest.raises(InsufficientStock) as exc_info:
            shop.checkout.handle("bob", ADDRESS, "cash_on_delivery")

        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert _reserved(shop, "1") == 3
        assert shop.cart_repo.get("bob").quantity_of("1") == 3
        assert shop.order_repo.list_by_owner("bob") == []

    def test_failure_on_third_of_four_releases_the_first_two(self):
        products = [Product(id=str(i), name=f"P{i}", price=Money.of("10")) for i in range(1, 5)]
        inventory = [InventoryItem(product_id=p.id, product_name=p.name, stock=5) for p in products]

        # Someone else grabs 4 units of product 3 after validation passed.
        shop = _setup(
            products=products,
            inventory_repo=InterferingInventoryRepository(
                inventory, before_lock={"3": lambda item: item.reserve(4)},
            ),
        )
        for p in products:
            shop.add.handle("alice", p.id, 2)

        with pytest.raises(InsufficientStock):
            shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        assert _reserved(shop, "1") == 0
        assert _reserved(shop, "2") == 0
        assert _reserved(shop, "3") == 4
        assert _reserved(shop, "4") == 0
        assert shop.order_repo.all() == []
        assert shop.journal.list_open() == []
        assert len(shop.cart_repo.get("alice").items) == 4

    def test_order_store_failure_rolls_back(self):
        shop = _setup(order_repo=FailingOrderRepository())
        shop.add.handle("alice", "1", 2)
        shop.add.handle("alice", "2", 1)

        with pytest.raises(OSError):
            shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        assert _reserved(shop, "1") == 0
        assert _reserved(shop, "2") == 0
        assert shop.journal.list_open() == []
        assert len(shop.cart_repo.get("alice").items) == 2


class TestCheckoutValidation:

    def test_empty_cart_rejected(self):
        shop = _setup()
        with pytest.raises(EmptyCart):
            shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

    def test_double_submit_places_one_order(self):
        shop = _setup()
        shop.add.handle("alice", "1", 2)

        shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")
        with pytest.raises(EmptyCart):
            shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        assert len(shop.order_repo.list_by_owner("alice")) == 1
        assert _reserved(shop, "1") == 2

    def test_deleted_product_reported_unavailable(self):
        shop = _setup()
        shop.add.handle("alice", "1", 1)
        shop.add.handle("alice", "2", 1)
        shop.product_repo.delete("2")

        with pytest.raises(ItemUnavailable) as exc_info:
            shop.checkout.handle("alice", ADDRESS, "cash_on_delivery")

        assert exc_info.value.product_id == "2"
        assert _reserved(shop, "1") == 0
        assert len(shop.cart_repo.get("alice").items) == 2

    def test_missing_address_rejected_before_reserving(self):
        shop = _setup()
        shop.add.handle("alice", "1", 1)

        with pytest.raises(ValidationError, match="Shipping address"):
            shop.checkout.handle("alice", {}, "cash_on_delivery")

        assert _reserved(shop, "1") == 0
        assert shop.journal.list_open() == []
