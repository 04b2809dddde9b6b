"""Unit tests for the InventoryItem aggregate."""

import pytest

from cartkeeper.domain.exceptions import InsufficientStock, ValidationError
from cartkeeper.domain.model.inventory import InventoryItem


def _item(stock: int = 10, reserved: int = 0) -> InventoryItem:
    return InventoryItem(product_id="1", product_name="Widget", stock=stock, reserved=reserved)


class TestInventoryItemReserve:

    def test_reserve_reduces_available(self):
        inv = _item(stock=100)
        inv.reserve(30)
        assert inv.available == 70
        assert inv.reserved == 30

    def test_reserve_all_available(self):
        inv = _item(stock=10)
        inv.reserve(10)
        assert inv.available == 0

    def test_reserve_more_than_available_rejected_without_mutation(self):
        inv = _item(stock=10, reserved=4)
        with pytest.raises(InsufficientStock) as info:
            inv.reserve(7)
        assert info.value.product_id == "1"
        assert info.value.requested == 7
        assert info.value.available == 6
        assert inv.reserved == 4

    def test_reserve_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _item().reserve(0)

    def test_reserve_bumps_version(self):
        inv = _item()
        inv.reserve(1)
        inv.reserve(1)
        assert inv.version == 2


class TestInventoryItemRelease:

    def test_release_increases_available(self):
        inv = _item(stock=100, reserved=30)
        assert inv.release(10) == 10
        assert inv.available == 80

    def test_over_release_clamps_at_zero(self):
        inv = _item(stock=100, reserved=10)
        assert inv.release(25) == 10
        assert inv.reserved == 0
        assert inv.available == 100

    def test_release_with_nothing_reserved_is_harmless(self):
        inv = _item(stock=5)
        assert inv.release(3) == 0
        assert inv.reserved == 0

    def test_release_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _item(reserved=1).release(0)


class TestInventoryItemRestock:

    def test_restock_changes_available(self):
        inv = _item(stock=10, reserved=4)
        inv.restock(20)
        assert inv.available == 16

    def test_restock_below_reserved_rejected(self):
        inv = _item(stock=10, reserved=4)
        with pytest.raises(ValidationError, match="are reserved"):
            inv.restock(3)
        assert inv.stock == 10

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _item().restock(-1)


class TestInventoryItemInvariants:

    def test_available_is_stock_minus_reserved(self):
        assert _item(stock=100, reserved=25).available == 75

    def test_corrupt_counters_detected(self):
        inv = _item(stock=3, reserved=5)
        with pytest.raises(ValidationError, match="exceeds stock"):
            inv.check_invariants()

    def test_corrupt_counters_block_mutation(self):
        inv = _item(stock=3, reserved=5)
        with pytest.raises(ValidationError):
            inv.reserve(1)
