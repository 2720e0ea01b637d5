"""Delete Items Use Case - single and bulk delete."""

from stockledger.application.dto.responses import DeleteItemsResponse
from stockledger.config import get_logger
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.exceptions import ItemNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.event_bus import EventBus, get_event_bus

logger = get_logger(__name__)


class DeleteItemsUseCase:
    """Delete items together with their transaction history."""

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        event_bus: EventBus | None = None,
    ):
        self._inventory_store = inventory_store
        self._event_bus = event_bus

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockledger.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, item_ids: list[int]) -> DeleteItemsResponse:
        """Delete every listed item that exists. Unknown ids are skipped."""
        unique_ids = list(dict.fromkeys(item_ids))
        store = await self._get_inventory_store()
        deleted = await store.delete_items(unique_ids)

        if deleted:
            bus = self._event_bus or get_event_bus()
            await bus.publish(
                InventoryEvent(
                    event_type=InventoryEventType.ITEMS_DELETED,
                    item_ids=tuple(unique_ids),
                    payload={"deleted": deleted},
                )
            )

        logger.info("items_deleted", requested=len(unique_ids), deleted=deleted)
        return DeleteItemsResponse(requested=len(unique_ids), deleted=deleted)

    async def delete_one(self, item_id: int) -> DeleteItemsResponse:
        """Delete a single item; a missing item is an error here."""
        result = await self.execute([item_id])
        if result.deleted == 0:
            raise ItemNotFoundError(item_id)
        return result
