"""Unit tests for the Order aggregate and its state machine."""

import pytest

from cartkeeper.domain.exceptions import AlreadyTerminal, ValidationError
from cartkeeper.domain.model.order import Order, OrderLineItem, OrderStatus
from cartkeeper.domain.model.value_objects import Money, PriceBreakdown, Quantity
from cartkeeper.domain.service.pricing import compute_totals

ADDRESS = {"fullName": "Alice", "city": "Pune"}


def _make_item(product_id: str = "1", qty: int = 1, price: str = "15.00") -> OrderLineItem:
    return OrderLineItem(
        product_id=product_id,
        product_name=f"Product {product_id}",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _place(items: list[OrderLineItem] | None = None, **overrides) -> Order:
    items = items if items is not None else [_make_item()]
    kwargs = dict(
        owner_id="alice",
        items=items,
        pricing=compute_totals((i.unit_price, i.quantity.value) for i in items),
        shipping_address=ADDRESS,
        payment_method="cash_on_delivery",
    )
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestOrderPlacement:

    def test_happy_path(self):
        order = _place([_make_item(qty=2, price="10.00")])
        assert order.owner_id == "alice"
        assert order.status == OrderStatus.PLACED
        assert order.total == Money.of("32.00")  # 20 + 2 tax + 10 shipping
        assert order.item_count == 2

    def test_id_is_none_for_new_orders(self):
        assert _place().id is None

    def test_single_history_entry(self):
        order = _place()
        assert [h.status for h in order.status_history] == [OrderStatus.PLACED]
        assert order.status_history[0].note == "Order placed"

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _place([], pricing=PriceBreakdown.empty())

    def test_duplicate_products_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            _place([_make_item("1"), _make_item("1")])

    def test_missing_address_rejected(self):
        with pytest.raises(ValidationError, match="Shipping address"):
            _place(shipping_address={})

    def test_blank_payment_method_rejected(self):
        with pytest.raises(ValidationError, match="Payment method"):
            _place(payment_method="  ")

    def test_unknown_shipping_method_rejected(self):
        with pytest.raises(ValidationError, match="Unknown shipping method"):
            _place(shipping_method="teleport")


class TestOrderTransitions:

    def test_full_forward_path(self):
        order = _place()
        order.advance_to(OrderStatus.CONFIRMED)
        order.advance_to(OrderStatus.SHIPPED)
        order.advance_to(OrderStatus.DELIVERED)
        assert order.status == OrderStatus.DELIVERED
        assert [h.status.value for h in order.status_history] == [
            "placed", "confirmed", "shipped", "delivered",
        ]

    def test_skipping_forward_rejected(self):
        order = _place()
        with pytest.raises(ValidationError, match="Cannot move order"):
            order.advance_to(OrderStatus.SHIPPED)

    def test_moving_backwards_rejected(self):
        order = _place()
        order.advance_to(OrderStatus.CONFIRMED)
        with pytest.raises(ValidationError, match="Cannot move order"):
            order.advance_to(OrderStatus.PLACED)

    def test_advance_to_cancelled_rejected(self):
        with pytest.raises(ValidationError, match="cancel"):
            _place().advance_to(OrderStatus.CANCELLED)

    @pytest.mark.parametrize("steps", [0, 1, 2])
    def test_cancel_from_any_open_status(self, steps):
        order = _place()
        for status in [OrderStatus.CONFIRMED, OrderStatus.SHIPPED][:steps]:
            order.advance_to(status)
        order.cancel()
        assert order.status == OrderStatus.CANCELLED
        assert order.status_history[-1].status == OrderStatus.CANCELLED

    def test_cancel_marks_every_product_pending_release(self):
        order = _place([_make_item("1"), _make_item("2")])
        order.cancel()
        assert order.pending_release == ["1", "2"]
        order.mark_released("1")
        assert order.pending_release == ["2"]

    def test_cancel_twice_rejected(self):
        order = _place()
        order.cancel()
        with pytest.raises(AlreadyTerminal):
            order.cancel()

    def test_cancel_delivered_rejected(self):
        order = _place()
        for status in (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order.advance_to(status)
        with pytest.raises(AlreadyTerminal, match="delivered"):
            order.cancel()


class TestOrderLineItem:

    def test_line_total_calculation(self):
        assert _make_item(qty=3, price="15.00").line_total == Money.of("45.00")
