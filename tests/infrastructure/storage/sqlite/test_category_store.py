"""Tests for SQLiteCategoryStore."""

import pytest

from stockledger.core.entities.category import Category
from stockledger.core.entities.inventory import InventoryItem
from stockledger.core.exceptions import CategoryNotFoundError, DuplicateCategoryError
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteInventoryStore,
)


@pytest.fixture
def store(sqlite_db) -> SQLiteCategoryStore:
    return SQLiteCategoryStore()


async def test_create_and_list_sorted(store):
    await store.create_category(Category(name="tea"))
    await store.create_category(Category(name="Coffee", description="Beans"))

    assert [c.name for c in await store.list_categories()] == ["Coffee", "tea"]


async def test_duplicate_name_ignoring_case(store):
    await store.create_category(Category(name="Coffee"))
    with pytest.raises(DuplicateCategoryError):
        await store.create_category(Category(name="COFFEE"))
    assert (await store.get_category_by_name("coffee")).name == "Coffee"


async def test_update(store):
    category = await store.create_category(Category(name="Coffee"))
    category.description = "Roasted"
    await store.update_category(category)
    assert (await store.get_category(category.id)).description == "Roasted"


async def test_update_missing(store):
    with pytest.raises(CategoryNotFoundError):
        await store.update_category(Category(id=42, name="Ghost"))


async def test_delete_detaches_items(store):
    category = await store.create_category(Category(name="Coffee"))
    items = SQLiteInventoryStore()
    item = await items.create_item(
        InventoryItem(name="Arabica beans", unit="kg", category_id=category.id)
    )

    assert await store.delete_category(category.id) is True
    assert await store.delete_category(category.id) is False

    kept = await items.get_item(item.id)
    assert kept is not None
    assert kept.category_id is None
