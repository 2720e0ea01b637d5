"""Get Item Metrics Use Case - derived stock and pricing figures."""

from stockledger.application.dto.responses import ItemMetricsResponse
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.metrics import MetricInputs
from stockledger.core.exceptions import ItemNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.metrics_calculator import (
    calculate_inventory_metrics,
    reorder_gap,
)

logger = get_logger(__name__)


class GetItemMetricsUseCase:
    """Compute the metrics snapshot shown on an item's detail page."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockledger.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, item_id: int) -> ItemMetricsResponse:
        store = await self._get_inventory_store()
        item = await store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        # newest first: [last, previous]
        recent = await store.get_recent_purchase_prices(item_id, limit=2)
        previous = recent[1] if len(recent) > 1 else None

        metrics = calculate_inventory_metrics(
            MetricInputs(
                stock_quantity=item.stock_quantity,
                selling_price=item.selling_price,
                average_purchase_price=item.average_purchase_price,
                last_purchase_price=item.last_purchase_price,
                second_last_purchase_price=previous,
                reorder_point=item.reorder_point,
            ),
            overstock_multiplier=get_settings().inventory.overstock_multiplier,
        )
        logger.debug("item_metrics_computed", item_id=item_id, status=metrics.stock_status.value)

        return ItemMetricsResponse(
            item_id=item_id,
            stock_status=metrics.stock_status,
            estimated_stock_value=metrics.estimated_stock_value,
            profit_per_unit=metrics.profit_per_unit,
            profit_margin_percent=metrics.profit_margin_percent,
            markup_percent=metrics.markup_percent,
            markup_unbounded=metrics.markup_unbounded,
            last_vs_average_delta_percent=metrics.last_vs_average_delta_percent,
            last_vs_previous_delta_value=metrics.last_vs_previous_delta_value,
            second_last_purchase_price=previous,
            reorder_gap=reorder_gap(item.stock_quantity, item.reorder_point),
        )
