"""
Core business logic services.

Layer-pure services that depend only on:
- stockledger/core/entities/*
- stockledger/core/exceptions.py

NO infrastructure imports. Stores are injected by the application layer.
"""

from stockledger.core.services.adjustment_reconciler import (
    change_transaction_type,
    new_draft,
    prepare_submission,
    reconcile,
    validate_draft,
)
from stockledger.core.services.adjustment_session import AdjustmentSession
from stockledger.core.services.event_bus import EventBus, get_event_bus, reset_event_bus
from stockledger.core.services.metrics_calculator import (
    DEFAULT_OVERSTOCK_MULTIPLIER,
    calculate_inventory_metrics,
    derive_stock_status,
    recalculate_average_cost,
    reorder_gap,
)

__all__ = [
    # Metrics
    "calculate_inventory_metrics",
    "derive_stock_status",
    "recalculate_average_cost",
    "reorder_gap",
    "DEFAULT_OVERSTOCK_MULTIPLIER",
    # Adjustment reconciler
    "new_draft",
    "change_transaction_type",
    "reconcile",
    "validate_draft",
    "prepare_submission",
    # Adjustment session
    "AdjustmentSession",
    # Events
    "EventBus",
    "get_event_bus",
    "reset_event_bus",
]
