"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.adjustment import StockAdjustmentDraft, StockAdjustmentRequest
from stockledger.core.entities.metrics import MarkupValue, StockStatus

# --- Common ---


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


class FieldErrorResponse(BaseModel):
    """A validation failure tied to one input field."""

    field: str
    message: str
    max_allowed: float | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    Rejected adjustments and request validation failures also carry
    ``field_errors`` so a form can show each message next to its field.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    field_errors: list[FieldErrorResponse] | None = Field(
        default=None, description="Per-field validation errors"
    )
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


# --- Categories ---


class CategoryResponse(BaseModel):
    """Category response DTO."""

    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    total: int


# --- Inventory ---


class InventoryItemResponse(BaseModel):
    """Inventory item with its derived stock status."""

    id: int
    name: str
    unit: str
    description: str | None = None
    category_id: int | None = None
    category_name: str | None = None
    stock_quantity: int
    reorder_point: int | None = None
    selling_price: float | None = None
    average_purchase_price: float | None = None
    last_purchase_price: float | None = None
    stock_value: float
    stock_status: StockStatus
    reorder_gap: float | None = Field(
        default=None, description="Units above (+) or below (-) the reorder point"
    )
    created_at: datetime
    updated_at: datetime


class InventoryItemListResponse(PaginatedResponse):
    """Paginated inventory list."""

    items: list[InventoryItemResponse]


class StockTransactionResponse(BaseModel):
    """Stock transaction response DTO."""

    id: int
    item_id: int
    transaction_type: str
    direction: str
    quantity_change: int
    unit_price: float | None = None
    total_price: float | None = None
    reference_number: str | None = None
    reason: str | None = None
    transaction_date: datetime
    actor: str | None = None
    created_at: datetime


class TransactionHistoryResponse(PaginatedResponse):
    """Paginated transaction history for one item, newest first."""

    item_id: int
    transactions: list[StockTransactionResponse]


class StockAdjustmentResponse(BaseModel):
    """Result of a submitted stock adjustment."""

    item: InventoryItemResponse
    transaction: StockTransactionResponse


class ItemMetricsResponse(BaseModel):
    """Derived metrics for one item. Null means the value is unavailable."""

    item_id: int
    stock_status: StockStatus
    estimated_stock_value: float
    profit_per_unit: float | None = None
    profit_margin_percent: float | None = None
    markup_percent: MarkupValue = Field(
        default=None, description='Percent, or "unbounded" when cost basis is zero'
    )
    markup_unbounded: bool = False
    last_vs_average_delta_percent: float | None = None
    last_vs_previous_delta_value: float | None = None
    second_last_purchase_price: float | None = None
    reorder_gap: float | None = None


class DeleteItemsResponse(BaseModel):
    """Outcome of a (bulk) delete."""

    requested: int
    deleted: int


class ReconcileDraftResponse(BaseModel):
    """Draft after one reconciled field edit."""

    draft: StockAdjustmentDraft


class DraftValidationResponse(BaseModel):
    """Outcome of a dry-run draft validation."""

    valid: bool
    field_errors: list[FieldErrorResponse] = Field(default_factory=list)
    request: StockAdjustmentRequest | None = None
