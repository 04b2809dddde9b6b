"""Tests for the JSON-file repositories, run against a temp directory."""

import json
import threading
from datetime import datetime, timezone

from cartkeeper.domain.model.cart import Cart
from cartkeeper.domain.model.checkout import CheckoutRecord
from cartkeeper.domain.model.inventory import InventoryItem
from cartkeeper.domain.model.order import Order, OrderLineItem, OrderStatus
from cartkeeper.domain.model.product import Product
from cartkeeper.domain.model.value_objects import Money, Quantity
from cartkeeper.domain.service.pricing import compute_totals
from cartkeeper.infrastructure.persistence.json_cart_repository import JsonCartRepository
from cartkeeper.infrastructure.persistence.json_checkout_journal import JsonCheckoutJournal
from cartkeeper.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from cartkeeper.infrastructure.persistence.json_order_repository import JsonOrderRepository
from cartkeeper.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def _order(owner_id: str = "alice") -> Order:
    items = [OrderLineItem("1", "Widget", Quantity(2), Money.of("15.00"), specifications={"size": "M"})]
    return Order.place(
        owner_id=owner_id,
        items=items,
        pricing=compute_totals((i.unit_price, i.quantity.value) for i in items),
        shipping_address={"fullName": "Alice", "city": "Pune"},
        payment_method="cash_on_delivery",
        checkout_token="tok-1",
    )


class TestJsonProductRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_and_lookup(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product(id="1", name="Widget", price=Money.of("15.00")))

        assert repo.get_by_id("1").price == Money.of("15.00")
        assert repo.get_by_name("WIDGET").id == "1"
        assert repo.get_by_id("2") is None

    def test_save_overwrites_and_delete(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product(id="1", name="Widget", price=Money.of("15.00")))
        repo.save(Product(id="1", name="Widget", price=Money.of("17.00")))
        assert len(repo.list_all()) == 1

        repo.delete("1")
        assert repo.list_all() == []


class TestJsonInventoryRepository:

    def test_round_trip_counters(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        item = InventoryItem(product_id="1", product_name="Widget", stock=10)
        item.reserve(4)
        repo.save(item)

        loaded = repo.get_by_product_id("1")
        assert (loaded.stock, loaded.reserved, loaded.available) == (10, 4, 6)
        assert loaded.version == 1

    def test_new_instance_sees_saved_data(self, tmp_path):
        path = tmp_path / "inventory.json"
        JsonInventoryRepository(path).save(InventoryItem(product_id="1", product_name="W", stock=3))
        assert JsonInventoryRepository(path).get_by_product_id("1").stock == 3

    def test_no_temp_file_left_behind(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(InventoryItem(product_id="1", product_name="W", stock=3))
        assert not list(tmp_path.glob("*.tmp"))
        assert JsonInventoryRepository(tmp_path / "inventory.json").list_all()[0].stock == 3


class TestJsonCartRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        cart = Cart(owner_id="alice")
        cart.add("1", "Widget", 2, Money.of("15.00"), specifications={"size": "M"})
        repo.put(cart)

        loaded = repo.get("alice")
        assert loaded.quantity_of("1") == 2
        assert loaded.find("1").specifications == {"size": "M"}
        assert loaded.find("1").unit_price == Money.of("15.00")

    def test_delete(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        repo.put(Cart(owner_id="alice"))
        repo.delete("alice")
        repo.delete("alice")
        assert repo.get("alice") is None

    def test_parallel_writers_keep_each_others_carts(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")

        def write(owner):
            cart = Cart(owner_id=owner)
            cart.add("1", "Widget", 1, Money.of("1"))
            repo.put(cart)

        threads = [threading.Thread(target=write, args=(f"user{i}",)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(repo.get(f"user{i}") is not None for i in range(20))


class TestJsonOrderRepository:

    def test_save_assigns_sequential_ids(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json", prefix="WM")
        first, second = _order(), _order("bob")
        repo.save(first)
        repo.save(second)

        year = datetime.now(timezone.utc).year
        assert first.id == f"WM-{year}-000001"
        assert second.id == f"WM-{year}-000002"

    def test_ids_continue_from_highest_sequence(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path).save(_order())
        raw = json.loads(path.read_text())
        raw[0]["id"] = "WM-2025-000041"
        path.write_text(json.dumps(raw))

        order = _order("bob")
        JsonOrderRepository(path).save(order)
        assert order.id.endswith("-000042")

    def test_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.total == order.total
        assert loaded.pricing == order.pricing
        assert loaded.items[0].specifications == {"size": "M"}
        assert loaded.shipping_address["city"] == "Pune"
        assert loaded.status_history[0].note == "Order placed"
        assert repo.get_by_checkout_token("tok-1").id == order.id

    def test_cancelled_order_tracks_pending_release(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)
        order.cancel()
        repo.save(order)

        pending = repo.list_pending_release()
        assert [o.id for o in pending] == [order.id]
        assert pending[0].status == OrderStatus.CANCELLED

    def test_list_by_owner(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        for owner in ("alice", "bob", "alice"):
            repo.save(_order(owner))
        assert len(repo.list_by_owner("alice")) == 2


class TestJsonCheckoutJournal:

    def test_save_get_discard(self, tmp_path):
        journal = JsonCheckoutJournal(tmp_path / "checkouts.json")
        record = CheckoutRecord.open("alice")
        record.record_reservation("1", 2)
        journal.save(record)

        loaded = journal.get(record.token)
        assert loaded.reservations == {"1": 2}
        assert [r.token for r in journal.list_open()] == [record.token]

        journal.discard(record.token)
        assert journal.get(record.token) is None
        assert journal.list_open() == []
