"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """Kinds of stock transactions."""

    # Increase
    PURCHASE = "purchase"
    RETURN = "return"
    CORRECTION_ADD = "correction-add"
    OTHER_ADDITION = "other-addition"
    INITIAL_STOCK = "initial-stock"  # recorded on item creation only

    # Decrease
    SALE = "sale"
    DAMAGED = "damaged"
    LOSS = "loss"
    EXPIRED = "expired"
    CORRECTION_REMOVE = "correction-remove"
    OTHER_REMOVAL = "other-removal"


class Direction(str, Enum):
    """Which way a transaction moves stock."""

    INCREASE = "increase"
    DECREASE = "decrease"


INCREASE_TYPES: frozenset[TransactionType] = frozenset(
    {
        TransactionType.PURCHASE,
        TransactionType.RETURN,
        TransactionType.CORRECTION_ADD,
        TransactionType.OTHER_ADDITION,
        TransactionType.INITIAL_STOCK,
    }
)

DECREASE_TYPES: frozenset[TransactionType] = frozenset(
    {
        TransactionType.SALE,
        TransactionType.DAMAGED,
        TransactionType.LOSS,
        TransactionType.EXPIRED,
        TransactionType.CORRECTION_REMOVE,
        TransactionType.OTHER_REMOVAL,
    }
)

PRICED_TYPES: frozenset[TransactionType] = frozenset(
    {
        TransactionType.PURCHASE,
        TransactionType.SALE,
        TransactionType.RETURN,
        TransactionType.DAMAGED,
        TransactionType.EXPIRED,
        TransactionType.LOSS,
    }
)

# Corrections and write-offs
REASON_REQUIRED_TYPES: frozenset[TransactionType] = frozenset(
    {
        TransactionType.CORRECTION_ADD,
        TransactionType.CORRECTION_REMOVE,
        TransactionType.DAMAGED,
        TransactionType.LOSS,
        TransactionType.EXPIRED,
    }
)

# Receipts that move the weighted average purchase price
COST_BASIS_TYPES: frozenset[TransactionType] = frozenset(
    {TransactionType.PURCHASE, TransactionType.INITIAL_STOCK}
)


def direction_of(transaction_type: TransactionType) -> Direction:
    """Return the stock direction of a transaction type."""
    if transaction_type in INCREASE_TYPES:
        return Direction.INCREASE
    return Direction.DECREASE


def requires_price(transaction_type: TransactionType) -> bool:
    return transaction_type in PRICED_TYPES


def requires_reason(transaction_type: TransactionType) -> bool:
    return transaction_type in REASON_REQUIRED_TYPES


class InventoryItem(BaseModel):
    """A stocked item with its pricing snapshot."""

    id: int | None = None
    name: str
    unit: str
    description: str | None = None
    category_id: int | None = None
    category_name: str | None = None  # read-only join
    stock_quantity: int = Field(default=0, ge=0)
    reorder_point: int | None = Field(default=None, ge=0)
    selling_price: float | None = Field(default=None, ge=0)
    average_purchase_price: float | None = Field(default=None, ge=0)
    last_purchase_price: float | None = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def stock_value(self) -> float:
        """Stock value = quantity * average purchase price."""
        return self.stock_quantity * (self.average_purchase_price or 0.0)


class StockTransaction(BaseModel):
    """Append-only record of a single stock change."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    item_id: int
    transaction_type: TransactionType
    quantity_change: int  # signed
    unit_price: float | None = None
    total_price: float | None = None
    reference_number: str | None = None
    reason: str | None = None
    transaction_date: datetime = Field(default_factory=datetime.utcnow)
    actor: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def direction(self) -> Direction:
        return direction_of(self.transaction_type)
