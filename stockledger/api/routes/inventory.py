"""Inventory item, metrics, history and stock adjustment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_adjust_stock_use_case,
    get_app_settings,
    get_create_item_use_case,
    get_delete_items_use_case,
    get_item_metrics_use_case,
    get_item_store,
    get_update_item_use_case,
)
from stockledger.application.dto.requests import (
    BulkDeleteRequest,
    CreateItemRequest,
    ItemListQuery,
    StockAdjustmentSubmitRequest,
    TransactionHistoryQuery,
    UpdateItemRequest,
    UpdateReorderPointRequest,
)
from stockledger.application.dto.responses import (
    DeleteItemsResponse,
    ErrorResponse,
    InventoryItemListResponse,
    InventoryItemResponse,
    ItemMetricsResponse,
    StockAdjustmentResponse,
    TransactionHistoryResponse,
)
from stockledger.application.mappers import item_to_response, transaction_to_response
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    CreateItemUseCase,
    DeleteItemsUseCase,
    GetItemMetricsUseCase,
    UpdateItemUseCase,
)
from stockledger.application.use_cases.adjust_stock import as_naive_utc
from stockledger.config import Settings
from stockledger.core.exceptions import ItemNotFoundError
from stockledger.core.interfaces import IInventoryStore

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/items", response_model=InventoryItemListResponse)
async def list_items(
    query: Annotated[ItemListQuery, Query()],
    store: IInventoryStore = Depends(get_item_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemListResponse:
    """List items with optional category, name search and low-stock filters."""
    filters = {
        "category_id": query.category_id,
        "search": query.search,
        "low_stock_only": query.low_stock_only,
    }
    items = await store.list_items(limit=query.limit, offset=query.offset, **filters)
    total = await store.count_items(**filters)
    multiplier = settings.inventory.overstock_multiplier
    return InventoryItemListResponse(
        items=[item_to_response(item, multiplier) for item in items],
        total=total,
        limit=query.limit,
        offset=query.offset,
        has_more=query.offset + len(items) < total,
    )


@router.post(
    "/items",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    actor: str | None = Depends(get_actor),
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> InventoryItemResponse:
    """Create an item, optionally with opening stock."""
    item = await use_case.execute(request, actor=actor)
    return use_case.to_response(item)


@router.post("/items/bulk-delete", response_model=DeleteItemsResponse)
async def bulk_delete_items(
    request: BulkDeleteRequest,
    use_case: DeleteItemsUseCase = Depends(get_delete_items_use_case),
) -> DeleteItemsResponse:
    """Delete several items. Unknown IDs are skipped."""
    return await use_case.execute(request.item_ids)


@router.get(
    "/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    store: IInventoryStore = Depends(get_item_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemResponse:
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item_to_response(item, settings.inventory.overstock_multiplier)


@router.put(
    "/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    request: UpdateItemRequest,
    use_case: UpdateItemUseCase = Depends(get_update_item_use_case),
) -> InventoryItemResponse:
    """Replace the editable fields of an item."""
    item = await use_case.execute(item_id, request)
    return use_case.to_response(item)


@router.patch(
    "/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_reorder_point(
    item_id: int,
    request: UpdateReorderPointRequest,
    use_case: UpdateItemUseCase = Depends(get_update_item_use_case),
) -> InventoryItemResponse:
    """Change only the reorder point (null clears it)."""
    item = await use_case.set_reorder_point(item_id, request.reorder_point)
    return use_case.to_response(item)


@router.delete(
    "/items/{item_id}",
    response_model=DeleteItemsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    use_case: DeleteItemsUseCase = Depends(get_delete_items_use_case),
) -> DeleteItemsResponse:
    """Delete one item together with its transaction history."""
    return await use_case.delete_one(item_id)


@router.get(
    "/items/{item_id}/metrics",
    response_model=ItemMetricsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item_metrics(
    item_id: int,
    use_case: GetItemMetricsUseCase = Depends(get_item_metrics_use_case),
) -> ItemMetricsResponse:
    """Derived stock value, profit, markup and purchase price trends."""
    return await use_case.execute(item_id)


@router.get(
    "/items/{item_id}/transactions",
    response_model=TransactionHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transactions(
    item_id: int,
    query: Annotated[TransactionHistoryQuery, Query()],
    store: IInventoryStore = Depends(get_item_store),
) -> TransactionHistoryResponse:
    """Transaction history of one item, newest first."""
    if await store.get_item(item_id) is None:
        raise ItemNotFoundError(item_id)

    filters = {
        "transaction_types": query.transaction_types,
        "date_from": as_naive_utc(query.date_from) if query.date_from else None,
        "date_to": as_naive_utc(query.date_to) if query.date_to else None,
    }
    transactions = await store.get_transactions(
        item_id, limit=query.limit, offset=query.offset, **filters
    )
    total = await store.count_transactions(item_id, **filters)
    return TransactionHistoryResponse(
        item_id=item_id,
        transactions=[transaction_to_response(tx) for tx in transactions],
        total=total,
        limit=query.limit,
        offset=query.offset,
        has_more=query.offset + len(transactions) < total,
    )


@router.post(
    "/items/{item_id}/stock",
    response_model=StockAdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    item_id: int,
    request: StockAdjustmentSubmitRequest,
    actor: str | None = Depends(get_actor),
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockAdjustmentResponse:
    """Submit a stock adjustment.

    Field errors come back as 422 with ``field_errors``; a decrease that
    lost a race with another adjustment comes back as 409.
    """
    result = await use_case.execute(item_id, request, actor=actor)
    return use_case.to_response(result)
