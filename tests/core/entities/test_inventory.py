"""Tests for inventory entities."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from stockledger.core.entities.inventory import (
    COST_BASIS_TYPES,
    DECREASE_TYPES,
    INCREASE_TYPES,
    Direction,
    InventoryItem,
    StockTransaction,
    TransactionType,
    direction_of,
    requires_price,
    requires_reason,
)


class TestTransactionTypeClassification:
    """Direction, price and reason rules per transaction type."""

    def test_every_type_has_exactly_one_direction(self):
        assert INCREASE_TYPES.isdisjoint(DECREASE_TYPES)
        assert INCREASE_TYPES | DECREASE_TYPES == set(TransactionType)

    @pytest.mark.parametrize(
        "tx_type",
        ["purchase", "return", "correction-add", "other-addition", "initial-stock"],
    )
    def test_increase_types(self, tx_type):
        assert direction_of(TransactionType(tx_type)) is Direction.INCREASE

    @pytest.mark.parametrize(
        "tx_type",
        ["sale", "damaged", "loss", "expired", "correction-remove", "other-removal"],
    )
    def test_decrease_types(self, tx_type):
        assert direction_of(TransactionType(tx_type)) is Direction.DECREASE

    def test_priced_types(self):
        priced = {t for t in TransactionType if requires_price(t)}
        assert priced == {
            TransactionType.PURCHASE,
            TransactionType.SALE,
            TransactionType.RETURN,
            TransactionType.DAMAGED,
            TransactionType.EXPIRED,
            TransactionType.LOSS,
        }

    def test_reason_required_types(self):
        needs_reason = {t for t in TransactionType if requires_reason(t)}
        assert needs_reason == {
            TransactionType.CORRECTION_ADD,
            TransactionType.CORRECTION_REMOVE,
            TransactionType.DAMAGED,
            TransactionType.LOSS,
            TransactionType.EXPIRED,
        }

    def test_cost_basis_types(self):
        assert COST_BASIS_TYPES == {TransactionType.PURCHASE, TransactionType.INITIAL_STOCK}


class TestInventoryItem:
    """Tests for InventoryItem entity."""

    def test_defaults(self):
        item = InventoryItem(name="Tea", unit="box")
        assert item.id is None
        assert item.stock_quantity == 0
        assert item.reorder_point is None
        assert item.average_purchase_price is None
        assert item.category_name is None

    def test_stock_value(self):
        item = InventoryItem(
            name="Tea", unit="box", stock_quantity=20, average_purchase_price=2.5
        )
        assert item.stock_value == 50.0

    def test_stock_value_without_cost_basis(self):
        item = InventoryItem(name="Tea", unit="box", stock_quantity=20)
        assert item.stock_value == 0.0

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            InventoryItem(name="Tea", unit="box", stock_quantity=-1)

    def test_negative_prices_rejected(self):
        with pytest.raises(ValidationError):
            InventoryItem(name="Tea", unit="box", selling_price=-0.01)
        with pytest.raises(ValidationError):
            InventoryItem(name="Tea", unit="box", reorder_point=-5)


class TestStockTransaction:
    """Tests for StockTransaction entity."""

    def test_direction_follows_type(self):
        tx = StockTransaction(
            item_id=1, transaction_type=TransactionType.SALE, quantity_change=-3
        )
        assert tx.direction is Direction.DECREASE

    def test_is_frozen(self):
        tx = StockTransaction(
            item_id=1,
            transaction_type=TransactionType.PURCHASE,
            quantity_change=5,
            transaction_date=datetime(2024, 1, 1),
        )
        with pytest.raises(ValidationError):
            tx.quantity_change = 6
