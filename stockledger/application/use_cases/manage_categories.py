"""Manage Categories Use Case - create, rename and delete categories."""

from stockledger.application.dto.requests import CreateCategoryRequest, UpdateCategoryRequest
from stockledger.config import get_logger
from stockledger.core.entities.category import Category
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.exceptions import CategoryNotFoundError, DuplicateCategoryError
from stockledger.core.interfaces.inventory_store import ICategoryStore
from stockledger.core.services.event_bus import EventBus, get_event_bus

logger = get_logger(__name__)


class ManageCategoriesUseCase:
    """Category mutations. Names are unique regardless of case."""

    def __init__(
        self,
        category_store: ICategoryStore | None = None,
        event_bus: EventBus | None = None,
    ):
        self._category_store = category_store
        self._event_bus = event_bus

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from stockledger.infrastructure.storage.sqlite import get_category_store

            self._category_store = await get_category_store()
        return self._category_store

    async def _publish(self, category_id: int | None, action: str) -> None:
        bus = self._event_bus or get_event_bus()
        await bus.publish(
            InventoryEvent(
                event_type=InventoryEventType.CATEGORIES_CHANGED,
                payload={"category_id": category_id, "action": action},
            )
        )

    async def list_all(self) -> list[Category]:
        store = await self._get_category_store()
        return await store.list_categories()

    async def create(self, request: CreateCategoryRequest) -> Category:
        store = await self._get_category_store()
        existing = await store.get_category_by_name(request.name)
        if existing is not None:
            raise DuplicateCategoryError(request.name, existing.id)

        category = await store.create_category(
            Category(name=request.name, description=request.description)
        )
        await self._publish(category.id, "created")
        logger.info("category_created", category_id=category.id, name=category.name)
        return category

    async def update(self, category_id: int, request: UpdateCategoryRequest) -> Category:
        store = await self._get_category_store()
        category = await store.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        clash = await store.get_category_by_name(request.name)
        if clash is not None and clash.id != category_id:
            raise DuplicateCategoryError(request.name, clash.id)

        category.name = request.name
        category.description = request.description
        category = await store.update_category(category)
        await self._publish(category_id, "updated")
        return category

    async def delete(self, category_id: int) -> None:
        """Delete a category; its items stay, without a category."""
        store = await self._get_category_store()
        if not await store.delete_category(category_id):
            raise CategoryNotFoundError(category_id)
        await self._publish(category_id, "deleted")
        logger.info("category_deleted", category_id=category_id)
