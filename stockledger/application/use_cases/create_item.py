"""Create Item Use Case - new item with optional opening stock."""

from datetime import datetime

from stockledger.application.dto.requests import CreateItemRequest
from stockledger.application.dto.responses import InventoryItemResponse
from stockledger.application.mappers import item_to_response
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.entities.inventory import (
    InventoryItem,
    StockTransaction,
    TransactionType,
)
from stockledger.core.exceptions import CategoryNotFoundError, DuplicateItemError
from stockledger.core.interfaces.inventory_store import ICategoryStore, IInventoryStore
from stockledger.core.services.event_bus import EventBus, get_event_bus

logger = get_logger(__name__)


class CreateItemUseCase:
    """Create an inventory item.

    Opening stock is not written straight into the stock column alone: it
    is logged as an ``initial-stock`` transaction priced at the initial
    purchase price, which also seeds the average and last purchase price.
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

    async def execute(
        self, request: CreateItemRequest, actor: str | None = None
    ) -> InventoryItem:
        """
        Create the item.

        Raises:
            DuplicateItemError: Name already used (ignoring case).
            CategoryNotFoundError: ``category_id`` does not exist.
        """
        inv_store = await self._get_inventory_store()

        existing = await inv_store.get_item_by_name(request.name)
        if existing is not None:
            raise DuplicateItemError(request.name, existing.id)

        if request.category_id is not None:
            cat_store = await self._get_category_store()
            if await cat_store.get_category(request.category_id) is None:
                raise CategoryNotFoundError(request.category_id)

        opening_price = request.initial_purchase_price if request.initial_stock > 0 else None
        item = InventoryItem(
            name=request.name,
            unit=request.unit,
            description=request.description,
            category_id=request.category_id,
            stock_quantity=request.initial_stock,
            reorder_point=request.reorder_point,
            selling_price=request.selling_price,
            average_purchase_price=opening_price,
            last_purchase_price=opening_price,
        )

        opening_stock = None
        if request.initial_stock > 0:
            opening_stock = StockTransaction(
                item_id=0,  # replaced with the new id by the store
                transaction_type=TransactionType.INITIAL_STOCK,
                quantity_change=request.initial_stock,
                unit_price=opening_price,
                total_price=round(request.initial_stock * opening_price, 2),
                reason="Initial stock",
                transaction_date=datetime.utcnow(),
                actor=actor,
            )

        item = await inv_store.create_item(item, opening_stock)

        bus = self._event_bus or get_event_bus()
        await bus.publish(
            InventoryEvent(event_type=InventoryEventType.ITEM_CHANGED, item_ids=(item.id,))
        )
        if opening_stock is not None:
            await bus.publish(
                InventoryEvent(
                    event_type=InventoryEventType.TRANSACTIONS_CHANGED, item_ids=(item.id,)
                )
            )

        logger.info(
            "item_created",
            item_id=item.id,
            name=item.name,
            initial_stock=request.initial_stock,
        )
        return item

    def to_response(self, item: InventoryItem) -> InventoryItemResponse:
        return item_to_response(item, get_settings().inventory.overstock_multiplier)
