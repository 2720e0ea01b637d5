"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockledger.core.entities.adjustment import EditedField, StockAdjustmentDraft
from stockledger.core.entities.inventory import TransactionType

# --- Inventory items ---


class _ItemEditableFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Item name, unique regardless of case",
        examples=["Arabica beans"],
    )
    category_id: int | None = Field(default=None, description="Category ID")
    selling_price: float | None = Field(
        default=None, ge=0, allow_inf_nan=False, description="Selling price per unit"
    )
    reorder_point: int | None = Field(
        default=None, ge=0, description="Stock level that triggers restocking"
    )
    description: str | None = Field(default=None, max_length=500)


class CreateItemRequest(_ItemEditableFields):
    """Request to create an inventory item, optionally with opening stock."""

    unit: str = Field(..., min_length=1, max_length=20, examples=["kg", "pcs"])
    initial_stock: int = Field(default=0, ge=0, description="Opening stock quantity")
    initial_purchase_price: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Unit cost of the opening stock (required when initial_stock > 0)",
    )

    @model_validator(mode="after")
    def _price_required_for_opening_stock(self) -> "CreateItemRequest":
        if self.initial_stock > 0 and self.initial_purchase_price is None:
            raise ValueError(
                "initial_purchase_price is required when initial_stock is greater than 0"
            )
        return self


class UpdateItemRequest(_ItemEditableFields):
    """Full edit of an item. Unit and prices other than selling price are not editable."""


class UpdateReorderPointRequest(BaseModel):
    """Partial edit touching only the reorder point."""

    reorder_point: int | None = Field(..., ge=0, description="New reorder point or null")


class BulkDeleteRequest(BaseModel):
    """Request to delete several items at once."""

    item_ids: list[int] = Field(..., min_length=1, max_length=500)


class ItemListQuery(BaseModel):
    """Filters and pagination for the item list."""

    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
    category_id: int | None = None
    search: str | None = Field(default=None, max_length=100)
    low_stock_only: bool = False


class TransactionHistoryQuery(BaseModel):
    """Filters and pagination for an item's transaction history."""

    transaction_types: list[TransactionType] | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _ordered_range(self) -> "TransactionHistoryQuery":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self


# --- Stock adjustments ---


class StockAdjustmentSubmitRequest(BaseModel):
    """A stock adjustment as sent by the adjustment form.

    Values are taken as the form left them; the server re-runs the full
    draft validation against the item's current stock before saving.
    """

    transaction_type: TransactionType
    quantity: float | None = Field(default=None, allow_inf_nan=False)
    unit_price: float | None = Field(default=None, allow_inf_nan=False)
    total_price: float | None = Field(default=None, allow_inf_nan=False)
    reference_number: str | None = None
    reason: str | None = None
    transaction_date: datetime | None = None


class ReconcileDraftRequest(BaseModel):
    """One field edit to run through the price reconciler."""

    draft: StockAdjustmentDraft
    field: EditedField
    value: float | None = Field(default=None, allow_inf_nan=False)
    current_stock: float | None = Field(default=None, ge=0)


class ChangeDraftTypeRequest(BaseModel):
    """Switch a draft to another transaction type."""

    draft: StockAdjustmentDraft
    transaction_type: TransactionType


class ValidateDraftRequest(BaseModel):
    """Run the submit-time checks on a draft without saving anything."""

    draft: StockAdjustmentDraft
    current_stock: float = Field(..., ge=0, allow_inf_nan=False)


# --- Categories ---


class CreateCategoryRequest(BaseModel):
    """Request to create a category."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, examples=["Beverages"])
    description: str | None = Field(default=None, max_length=500)


class UpdateCategoryRequest(CreateCategoryRequest):
    """Request to rename or re-describe a category."""
