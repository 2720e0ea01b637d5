"""Tests for ManageCategoriesUseCase."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.dto.requests import CreateCategoryRequest, UpdateCategoryRequest
from stockledger.application.use_cases.manage_categories import ManageCategoriesUseCase
from stockledger.core.entities.category import Category
from stockledger.core.entities.events import InventoryEventType
from stockledger.core.exceptions import CategoryNotFoundError, DuplicateCategoryError


@pytest.fixture
def mock_category_store():
    store = AsyncMock()
    store.get_category_by_name.return_value = None

    async def create(category):
        return category.model_copy(update={"id": 3})

    store.create_category.side_effect = create
    store.update_category.side_effect = lambda category: category
    return store


@pytest.fixture
def event_bus():
    return AsyncMock()


@pytest.fixture
def use_case(mock_category_store, event_bus):
    return ManageCategoriesUseCase(category_store=mock_category_store, event_bus=event_bus)


class TestManageCategoriesUseCase:
    async def test_create(self, use_case, event_bus):
        category = await use_case.create(CreateCategoryRequest(name="Coffee"))

        assert category.id == 3
        event = event_bus.publish.await_args.args[0]
        assert event.event_type is InventoryEventType.CATEGORIES_CHANGED
        assert event.payload == {"category_id": 3, "action": "created"}

    async def test_create_duplicate(self, use_case, mock_category_store):
        mock_category_store.get_category_by_name.return_value = Category(id=1, name="coffee")
        with pytest.raises(DuplicateCategoryError):
            await use_case.create(CreateCategoryRequest(name="Coffee"))
        mock_category_store.create_category.assert_not_awaited()

    async def test_rename(self, use_case, mock_category_store):
        mock_category_store.get_category.return_value = Category(id=1, name="Coffee")
        # own name in another case is not a clash
        mock_category_store.get_category_by_name.return_value = Category(id=1, name="Coffee")

        category = await use_case.update(
            1, UpdateCategoryRequest(name="COFFEE", description="Beans and ground")
        )

        assert category.name == "COFFEE"
        assert category.description == "Beans and ground"

    async def test_rename_clash(self, use_case, mock_category_store):
        mock_category_store.get_category.return_value = Category(id=1, name="Coffee")
        mock_category_store.get_category_by_name.return_value = Category(id=2, name="Tea")
        with pytest.raises(DuplicateCategoryError):
            await use_case.update(1, UpdateCategoryRequest(name="tea"))

    async def test_update_missing(self, use_case, mock_category_store):
        mock_category_store.get_category.return_value = None
        with pytest.raises(CategoryNotFoundError):
            await use_case.update(9, UpdateCategoryRequest(name="Tea"))

    async def test_delete(self, use_case, mock_category_store, event_bus):
        mock_category_store.delete_category.return_value = True
        await use_case.delete(1)
        assert event_bus.publish.await_args.args[0].payload["action"] == "deleted"

    async def test_delete_missing(self, use_case, mock_category_store, event_bus):
        mock_category_store.delete_category.return_value = False
        with pytest.raises(CategoryNotFoundError):
            await use_case.delete(1)
        event_bus.publish.assert_not_awaited()

    async def test_list_all(self, use_case, mock_category_store):
        mock_category_store.list_categories.return_value = [Category(id=1, name="Coffee")]
        assert [c.name for c in await use_case.list_all()] == ["Coffee"]
