"""Core domain entities."""

from stockledger.core.entities.adjustment import (
    AdjustmentSessionState,
    AdjustmentValidationResult,
    EditedField,
    FieldError,
    PricedDecreaseDraft,
    PricedIncreaseDraft,
    StockAdjustmentDraft,
    StockAdjustmentRequest,
    UnpricedDecreaseDraft,
    UnpricedIncreaseDraft,
)
from stockledger.core.entities.category import Category
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.entities.inventory import (
    DECREASE_TYPES,
    INCREASE_TYPES,
    Direction,
    InventoryItem,
    StockTransaction,
    TransactionType,
    direction_of,
    requires_price,
    requires_reason,
)
from stockledger.core.entities.metrics import (
    UNBOUNDED,
    CalculatedMetrics,
    MetricInputs,
    StockStatus,
)

__all__ = [
    # Inventory entities
    "InventoryItem",
    "StockTransaction",
    "TransactionType",
    "Direction",
    "INCREASE_TYPES",
    "DECREASE_TYPES",
    "direction_of",
    "requires_price",
    "requires_reason",
    # Category
    "Category",
    # Metrics
    "MetricInputs",
    "CalculatedMetrics",
    "StockStatus",
    "UNBOUNDED",
    # Adjustments
    "EditedField",
    "FieldError",
    "PricedIncreaseDraft",
    "UnpricedIncreaseDraft",
    "PricedDecreaseDraft",
    "UnpricedDecreaseDraft",
    "StockAdjustmentDraft",
    "StockAdjustmentRequest",
    "AdjustmentValidationResult",
    "AdjustmentSessionState",
    # Events
    "InventoryEvent",
    "InventoryEventType",
]
