"""Entity to response DTO conversion shared by routes and use cases."""

from stockledger.application.dto.responses import (
    CategoryResponse,
    InventoryItemResponse,
    StockTransactionResponse,
)
from stockledger.core.entities.category import Category
from stockledger.core.entities.inventory import InventoryItem, StockTransaction
from stockledger.core.services.metrics_calculator import (
    DEFAULT_OVERSTOCK_MULTIPLIER,
    derive_stock_status,
    reorder_gap,
)


def item_to_response(
    item: InventoryItem,
    overstock_multiplier: float | None = DEFAULT_OVERSTOCK_MULTIPLIER,
) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        unit=item.unit,
        description=item.description,
        category_id=item.category_id,
        category_name=item.category_name,
        stock_quantity=item.stock_quantity,
        reorder_point=item.reorder_point,
        selling_price=item.selling_price,
        average_purchase_price=item.average_purchase_price,
        last_purchase_price=item.last_purchase_price,
        stock_value=item.stock_value,
        stock_status=derive_stock_status(
            item.stock_quantity, item.reorder_point, overstock_multiplier
        ),
        reorder_gap=reorder_gap(item.stock_quantity, item.reorder_point),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def transaction_to_response(tx: StockTransaction) -> StockTransactionResponse:
    return StockTransactionResponse(
        id=tx.id,  # type: ignore[arg-type]
        item_id=tx.item_id,
        transaction_type=tx.transaction_type.value,
        direction=tx.direction.value,
        quantity_change=tx.quantity_change,
        unit_price=tx.unit_price,
        total_price=tx.total_price,
        reference_number=tx.reference_number,
        reason=tx.reason,
        transaction_date=tx.transaction_date,
        actor=tx.actor,
        created_at=tx.created_at,
    )


def category_to_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,  # type: ignore[arg-type]
        name=category.name,
        description=category.description,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )
