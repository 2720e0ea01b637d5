"""Update Item Use Case - full edit and reorder-point-only edit."""

from stockledger.application.dto.requests import UpdateItemRequest
from stockledger.application.dto.responses import InventoryItemResponse
from stockledger.application.mappers import item_to_response
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.entities.inventory import InventoryItem
from stockledger.core.exceptions import (
    CategoryNotFoundError,
    DuplicateItemError,
    ItemNotFoundError,
)
from stockledger.core.interfaces.inventory_store import ICategoryStore, IInventoryStore
from stockledger.core.services.event_bus import EventBus, get_event_bus

logger = get_logger(__name__)


class UpdateItemUseCase:
    """Edit an item's descriptive fields, selling price and reorder point.

    Stock quantity and purchase prices only change through adjustments.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        category_store: ICategoryStore | None = None,
        event_bus: EventBus | None = None,
    ):
        self._inventory_store = inventory_store
        self._category_store = category_store
        self._event_bus = event_bus

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockledger.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from stockledger.infrastructure.storage.sqlite import get_category_store

            self._category_store = await get_category_store()
        return self._category_store

    async def _publish(self, item_id: int) -> None:
        bus = self._event_bus or get_event_bus()
        await bus.publish(
            InventoryEvent(event_type=InventoryEventType.ITEM_CHANGED, item_ids=(item_id,))
        )

    async def execute(self, item_id: int, request: UpdateItemRequest) -> InventoryItem:
        """
        Replace the editable fields of an item.

        Raises:
            ItemNotFoundError: Unknown item.
            DuplicateItemError: New name taken by another item.
            CategoryNotFoundError: ``category_id`` does not exist.
        """
        inv_store = await self._get_inventory_store()
        item = await inv_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        if request.name.lower() != item.name.lower():
            clash = await inv_store.get_item_by_name(request.name)
            if clash is not None and clash.id != item_id:
                raise DuplicateItemError(request.name, clash.id)

        if request.category_id is not None and request.category_id != item.category_id:
            cat_store = await self._get_category_store()
            if await cat_store.get_category(request.category_id) is None:
                raise CategoryNotFoundError(request.category_id)

        item.name = request.name
        item.description = request.description
        item.category_id = request.category_id
        item.selling_price = request.selling_price
        item.reorder_point = request.reorder_point
        item = await inv_store.update_item(item)

        await self._publish(item_id)
        logger.info("item_updated", item_id=item_id)
        return item

    async def set_reorder_point(
        self, item_id: int, reorder_point: int | None
    ) -> InventoryItem:
        """Change only the reorder point."""
        inv_store = await self._get_inventory_store()
        item = await inv_store.update_reorder_point(item_id, reorder_point)
        if item is None:
            raise ItemNotFoundError(item_id)

        await self._publish(item_id)
        logger.info("reorder_point_set", item_id=item_id, reorder_point=reorder_point)
        return item

    def to_response(self, item: InventoryItem) -> InventoryItemResponse:
        return item_to_response(item, get_settings().inventory.overstock_multiplier)
