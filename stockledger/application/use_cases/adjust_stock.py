"""Adjust Stock Use Case - validate a draft, move stock, log the transaction."""

from dataclasses import dataclass
from datetime import datetime, timezone

from stockledger.application.dto.requests import StockAdjustmentSubmitRequest
from stockledger.application.dto.responses import StockAdjustmentResponse
from stockledger.application.mappers import item_to_response, transaction_to_response
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.adjustment import FieldError, StockAdjustmentRequest
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.entities.inventory import (
    Direction,
    InventoryItem,
    StockTransaction,
    requires_price,
)
from stockledger.core.exceptions import AdjustmentRejectedError, ItemNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.adjustment_reconciler import new_draft, prepare_submission
from stockledger.core.services.event_bus import EventBus, get_event_bus

logger = get_logger(__name__)


def as_naive_utc(value: datetime | None) -> datetime:
    """Timestamps are stored as naive UTC; aware inputs are converted."""
    if value is None:
        return datetime.utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass
class AdjustStockResult:
    """Result of a stock adjustment."""

    item: InventoryItem
    transaction: StockTransaction


class AdjustStockUseCase:
    """Submit a stock adjustment for one item."""

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

    def _get_event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = get_event_bus()
        return self._event_bus

    async def execute(
        self,
        item_id: int,
        request: StockAdjustmentSubmitRequest,
        actor: str | None = None,
    ) -> AdjustStockResult:
        """
        Validate the adjustment against fresh stock and persist it.

        Raises:
            ItemNotFoundError: Unknown item.
            AdjustmentRejectedError: One or more field errors.
            InsufficientStockError: Stock moved below the requested
                decrease between validation and the write.
            MalformedDraftError: ``initial-stock`` or an unknown type.
        """
        logger.info(
            "adjust_stock_started",
            item_id=item_id,
            transaction_type=request.transaction_type.value,
            quantity=request.quantity,
        )

        store = await self._get_inventory_store()
        item = await store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        # prices sent for a type that carries none are dropped, not rejected
        priced = requires_price(request.transaction_type)
        draft = new_draft(
            request.transaction_type,
            quantity=request.quantity,
            unit_price=request.unit_price if priced else None,
            total_price=request.total_price if priced else None,
            reference_number=request.reference_number,
            reason=request.reason,
            transaction_date=as_naive_utc(request.transaction_date),
        )

        limits = get_settings().inventory
        validation = prepare_submission(
            draft,
            item.stock_quantity,
            max_reference_length=limits.max_reference_length,
            max_reason_length=limits.max_reason_length,
        )
        if not validation.is_valid:
            logger.info(
                "adjust_stock_rejected",
                item_id=item_id,
                fields=[e.field for e in validation.errors],
            )
            raise AdjustmentRejectedError(item_id, validation.errors)

        adjustment = validation.request
        if not float(adjustment.quantity).is_integer():
            raise AdjustmentRejectedError(
                item_id,
                [FieldError(field="quantity", message="Quantity must be a whole number")],
            )

        transaction = StockTransaction(
            item_id=item_id,
            transaction_type=adjustment.transaction_type,
            quantity_change=self._signed_change(adjustment),
            unit_price=adjustment.unit_price,
            total_price=adjustment.total_price,
            reference_number=adjustment.reference_number,
            reason=adjustment.reason,
            transaction_date=adjustment.transaction_date,
            actor=actor,
        )
        saved, updated = await store.record_adjustment(transaction)

        bus = self._get_event_bus()
        await bus.publish(
            InventoryEvent(
                event_type=InventoryEventType.TRANSACTIONS_CHANGED,
                item_ids=(item_id,),
                payload={"transaction_id": saved.id},
            )
        )
        await bus.publish(
            InventoryEvent(
                event_type=InventoryEventType.ITEM_CHANGED,
                item_ids=(item_id,),
                payload={"stock_quantity": updated.stock_quantity},
            )
        )

        logger.info(
            "adjust_stock_complete",
            item_id=item_id,
            transaction_id=saved.id,
            new_qty=updated.stock_quantity,
        )
        return AdjustStockResult(item=updated, transaction=saved)

    @staticmethod
    def _signed_change(adjustment: StockAdjustmentRequest) -> int:
        quantity = int(adjustment.quantity)
        return quantity if adjustment.direction is Direction.INCREASE else -quantity

    def to_response(self, result: AdjustStockResult) -> StockAdjustmentResponse:
        """Convert result to API response."""
        multiplier = get_settings().inventory.overstock_multiplier
        return StockAdjustmentResponse(
            item=item_to_response(result.item, multiplier),
            transaction=transaction_to_response(result.transaction),
        )
