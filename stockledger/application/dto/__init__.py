"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    BulkDeleteRequest,
    ChangeDraftTypeRequest,
    CreateCategoryRequest,
    CreateItemRequest,
    ItemListQuery,
    ReconcileDraftRequest,
    StockAdjustmentSubmitRequest,
    TransactionHistoryQuery,
    UpdateCategoryRequest,
    UpdateItemRequest,
    UpdateReorderPointRequest,
    ValidateDraftRequest,
)
from stockledger.application.dto.responses import (
    CategoryListResponse,
    CategoryResponse,
    ComponentHealthResponse,
    DeleteItemsResponse,
    DraftValidationResponse,
    ErrorResponse,
    FieldErrorResponse,
    HealthResponse,
    InventoryItemListResponse,
    InventoryItemResponse,
    ItemMetricsResponse,
    PaginatedResponse,
    ReconcileDraftResponse,
    StockAdjustmentResponse,
    StockTransactionResponse,
    TransactionHistoryResponse,
)

__all__ = [
    # Requests
    "CreateItemRequest",
    "UpdateItemRequest",
    "UpdateReorderPointRequest",
    "BulkDeleteRequest",
    "ItemListQuery",
    "TransactionHistoryQuery",
    "StockAdjustmentSubmitRequest",
    "ReconcileDraftRequest",
    "ChangeDraftTypeRequest",
    "ValidateDraftRequest",
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    # Responses
    "PaginatedResponse",
    "ErrorResponse",
    "FieldErrorResponse",
    "HealthResponse",
    "ComponentHealthResponse",
    "CategoryResponse",
    "CategoryListResponse",
    "InventoryItemResponse",
    "InventoryItemListResponse",
    "StockTransactionResponse",
    "TransactionHistoryResponse",
    "StockAdjustmentResponse",
    "ItemMetricsResponse",
    "DeleteItemsResponse",
    "ReconcileDraftResponse",
    "DraftValidationResponse",
]
