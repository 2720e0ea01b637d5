"""Tests for SQLiteInventoryStore against a migrated database."""

import asyncio
from datetime import datetime, timedelta

import pytest

from stockledger.core.entities.category import Category
from stockledger.core.entities.inventory import (
    InventoryItem,
    StockTransaction,
    TransactionType,
)
from stockledger.core.exceptions import (
    DuplicateItemError,
    InsufficientStockError,
    ItemNotFoundError,
)
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteInventoryStore,
)


@pytest.fixture
def store(sqlite_db) -> SQLiteInventoryStore:
    return SQLiteInventoryStore()


def _tx(item_id: int, tx_type: TransactionType, change: int, **kwargs) -> StockTransaction:
    return StockTransaction(
        item_id=item_id, transaction_type=tx_type, quantity_change=change, **kwargs
    )


async def _item(store: SQLiteInventoryStore, name: str = "Arabica beans", **kwargs):
    return await store.create_item(InventoryItem(name=name, unit="kg", **kwargs))


class TestItems:
    async def test_create_and_get(self, store):
        created = await _item(store, reorder_point=5, selling_price=18.0)

        fetched = await store.get_item(created.id)
        assert fetched.name == "Arabica beans"
        assert fetched.reorder_point == 5
        assert fetched.stock_quantity == 0
        assert await store.get_item(created.id + 100) is None

    async def test_create_with_opening_stock(self, store):
        opening = _tx(
            0,
            TransactionType.INITIAL_STOCK,
            12,
            unit_price=3.0,
            total_price=36.0,
            reason="Initial stock",
        )
        item = await store.create_item(
            InventoryItem(
                name="Cocoa",
                unit="kg",
                stock_quantity=12,
                average_purchase_price=3.0,
                last_purchase_price=3.0,
            ),
            opening,
        )

        history = await store.get_transactions(item.id)
        assert len(history) == 1
        assert history[0].item_id == item.id
        assert history[0].transaction_type is TransactionType.INITIAL_STOCK
        assert await store.get_recent_purchase_prices(item.id) == [3.0]

    async def test_name_unique_ignoring_case(self, store):
        await _item(store)
        with pytest.raises(DuplicateItemError):
            await _item(store, name="ARABICA BEANS")
        found = await store.get_item_by_name(" arabica beans ")
        assert found is not None

    async def test_update(self, store):
        item = await _item(store)
        item.name = "Arabica, medium"
        item.selling_price = 21.0
        updated = await store.update_item(item)
        assert updated.name == "Arabica, medium"
        assert updated.selling_price == 21.0

    async def test_update_missing(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.update_item(InventoryItem(id=999, name="Ghost", unit="pcs"))

    async def test_update_reorder_point(self, store):
        item = await _item(store, reorder_point=4)
        assert (await store.update_reorder_point(item.id, None)).reorder_point is None
        assert await store.update_reorder_point(999, 1) is None

    async def test_list_filters_and_count(self, store):
        coffee = await SQLiteCategoryStore().create_category(Category(name="Coffee"))
        await _item(store, "Arabica beans", category_id=coffee.id, reorder_point=5)
        await _item(store, "Robusta beans", category_id=coffee.id)
        await _item(store, "Green tea", description="Sencha")

        names = [i.name for i in await store.list_items()]
        assert names == ["Arabica beans", "Green tea", "Robusta beans"]

        in_coffee = await store.list_items(category_id=coffee.id)
        assert {i.category_name for i in in_coffee} == {"Coffee"}
        assert await store.count_items(search="sencha") == 1
        # stock 0 with reorder point 5 is low; no reorder point is never low
        assert [i.name for i in await store.list_items(low_stock_only=True)] == [
            "Arabica beans"
        ]
        assert len(await store.list_items(limit=1, offset=1)) == 1

    async def test_delete_cascades_to_transactions(self, store):
        a = await _item(store, "A")
        b = await _item(store, "B")
        await store.record_adjustment(_tx(a.id, TransactionType.OTHER_ADDITION, 3))

        assert await store.delete_items([a.id, b.id, 999]) == 2
        assert await store.count_transactions(a.id) == 0
        assert await store.delete_items([]) == 0


class TestAdjustments:
    async def test_increase_then_decrease(self, store):
        item = await _item(store)

        tx, updated = await store.record_adjustment(
            _tx(item.id, TransactionType.PURCHASE, 10, unit_price=2.0, total_price=20.0),
        )
        assert tx.id is not None
        assert updated.stock_quantity == 10
        assert updated.average_purchase_price == 2.0

        _, updated = await store.record_adjustment(
            _tx(item.id, TransactionType.SALE, -4, unit_price=5.0, total_price=20.0),
        )
        assert updated.stock_quantity == 6

    async def test_purchases_move_weighted_average(self, store):
        item = await _item(store)
        for price in (5.0, 10.0, 20.0):
            _, updated = await store.record_adjustment(
                _tx(item.id, TransactionType.PURCHASE, 10, unit_price=price)
            )

        # (20 * 7.50 + 10 * 20) / 30, stored to the cent
        assert updated.average_purchase_price == 11.67
        assert updated.last_purchase_price == 20.0

    async def test_return_and_sale_keep_cost_basis(self, store):
        item = await _item(store)
        await store.record_adjustment(_tx(item.id, TransactionType.PURCHASE, 10, unit_price=4.0))

        await store.record_adjustment(_tx(item.id, TransactionType.RETURN, 2, unit_price=9.0))
        _, updated = await store.record_adjustment(
            _tx(item.id, TransactionType.SALE, -5, unit_price=12.0)
        )

        assert updated.stock_quantity == 7
        assert updated.average_purchase_price == 4.0
        assert updated.last_purchase_price == 4.0

    async def test_concurrent_purchases_both_reach_cost_basis(self, store):
        item = await _item(store)
        await store.record_adjustment(_tx(item.id, TransactionType.PURCHASE, 10, unit_price=5.0))

        await asyncio.gather(
            store.record_adjustment(_tx(item.id, TransactionType.PURCHASE, 10, unit_price=10.0)),
            store.record_adjustment(_tx(item.id, TransactionType.PURCHASE, 10, unit_price=20.0)),
        )

        final = await store.get_item(item.id)
        assert final.stock_quantity == 30
        assert final.average_purchase_price == 11.67
        assert final.last_purchase_price == (await store.get_recent_purchase_prices(item.id))[0]

    async def test_guard_rejects_negative_stock(self, store):
        item = await _item(store)
        await store.record_adjustment(_tx(item.id, TransactionType.OTHER_ADDITION, 2))

        with pytest.raises(InsufficientStockError) as exc_info:
            await store.record_adjustment(
                _tx(item.id, TransactionType.LOSS, -3, reason="spilled")
            )

        assert exc_info.value.details["available"] == 2
        assert (await store.get_item(item.id)).stock_quantity == 2
        assert await store.count_transactions(item.id) == 1

    async def test_unknown_item(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.record_adjustment(_tx(404, TransactionType.RETURN, 1))


class TestHistory:
    @pytest.fixture
    async def item_with_history(self, store):
        item = await _item(store)
        entries = [
            (TransactionType.PURCHASE, 10, 2.0, datetime(2024, 1, 5)),
            (TransactionType.SALE, -2, 4.0, datetime(2024, 1, 10)),
            (TransactionType.PURCHASE, 5, 2.5, datetime(2024, 2, 1)),
            (TransactionType.DAMAGED, -1, 2.5, datetime(2024, 2, 3)),
        ]
        for tx_type, change, price, when in entries:
            await store.record_adjustment(
                _tx(
                    item.id,
                    tx_type,
                    change,
                    unit_price=price,
                    total_price=abs(change) * price,
                    transaction_date=when,
                    reason="water damage" if tx_type is TransactionType.DAMAGED else None,
                )
            )
        return item

    async def test_newest_first(self, store, item_with_history):
        history = await store.get_transactions(item_with_history.id)
        assert [t.transaction_date.day for t in history] == [3, 1, 10, 5]

    async def test_type_and_date_filters(self, store, item_with_history):
        purchases = await store.get_transactions(
            item_with_history.id, transaction_types=[TransactionType.PURCHASE]
        )
        assert [t.quantity_change for t in purchases] == [5, 10]

        january = await store.count_transactions(
            item_with_history.id,
            date_from=datetime(2024, 1, 1),
            date_to=datetime(2024, 1, 31),
        )
        assert january == 2

    async def test_pagination(self, store, item_with_history):
        page = await store.get_transactions(item_with_history.id, limit=2, offset=2)
        assert [t.transaction_type for t in page] == [
            TransactionType.SALE,
            TransactionType.PURCHASE,
        ]

    async def test_recent_purchase_prices(self, store, item_with_history):
        assert await store.get_recent_purchase_prices(item_with_history.id) == [2.5, 2.0]

    async def test_recent_purchase_prices_follow_recording_order(self, store):
        item = await _item(store)
        await store.record_adjustment(
            _tx(item.id, TransactionType.INITIAL_STOCK, 5, unit_price=5.0)
        )
        await store.record_adjustment(_tx(item.id, TransactionType.PURCHASE, 5, unit_price=10.0))
        await store.record_adjustment(
            _tx(
                item.id,
                TransactionType.PURCHASE,
                5,
                unit_price=20.0,
                transaction_date=datetime.utcnow() - timedelta(days=30),
            )
        )

        assert (await store.get_item(item.id)).last_purchase_price == 20.0
        assert await store.get_recent_purchase_prices(item.id) == [20.0, 10.0]
