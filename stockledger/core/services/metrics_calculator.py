"""
Inventory metrics calculator.

Pure functions turning an item's stock and price fields into display
metrics. Nothing here raises for missing data: a metric whose inputs are
absent comes back as ``None``.
"""

import math

from stockledger.core.entities.metrics import (
    UNBOUNDED,
    CalculatedMetrics,
    MarkupValue,
    MetricInputs,
    StockStatus,
)

DEFAULT_OVERSTOCK_MULTIPLIER = 3.0


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def derive_stock_status(
    quantity: float,
    reorder_point: int | None,
    overstock_multiplier: float | None = DEFAULT_OVERSTOCK_MULTIPLIER,
) -> StockStatus:
    """
    Classify a stock level.

    Equal to the reorder point counts as low stock. Over-stocked needs a
    positive reorder point and a configured multiplier.
    """
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if reorder_point is not None and quantity <= reorder_point:
        return StockStatus.LOW_STOCK
    if (
        reorder_point
        and overstock_multiplier is not None
        and quantity > reorder_point * overstock_multiplier
    ):
        return StockStatus.OVER_STOCKED
    return StockStatus.IN_STOCK


def reorder_gap(quantity: float, reorder_point: int | None) -> float | None:
    """Units above (positive) or below (negative) the reorder point."""
    if reorder_point is None:
        return None
    return quantity - reorder_point


def _markup(profit: float | None, average_cost: float | None) -> MarkupValue:
    if profit is None or average_cost is None:
        return None
    if average_cost == 0:
        # selling price is never negative, so profit here is >= 0
        return UNBOUNDED if profit > 0 else 0.0
    markup = profit / average_cost * 100
    if math.isfinite(markup):
        return markup
    # a vanishingly small cost basis overflows the same way a zero one does
    return UNBOUNDED if markup > 0 else None


def calculate_inventory_metrics(
    inputs: MetricInputs,
    overstock_multiplier: float | None = DEFAULT_OVERSTOCK_MULTIPLIER,
) -> CalculatedMetrics:
    """
    Compute the metrics snapshot for one item.

    Args:
        inputs: Stock quantity and price fields of the item.
        overstock_multiplier: Reorder point multiple above which stock is
            reported as over-stocked. None disables that status.

    Returns:
        CalculatedMetrics with ``None`` for every unavailable value.
    """
    selling = inputs.selling_price
    average = inputs.average_purchase_price
    last = inputs.last_purchase_price
    previous = inputs.second_last_purchase_price

    stock_value = inputs.stock_quantity * (average if average is not None else 0.0)

    profit: float | None = None
    if selling is not None and average is not None:
        profit = selling - average

    margin: float | None = None
    if profit is not None and selling:
        margin = _finite(profit / selling * 100)

    last_vs_average: float | None = None
    if last is not None and average:
        last_vs_average = _finite((last - average) / average * 100)

    last_vs_previous: float | None = None
    if last is not None and previous is not None:
        last_vs_previous = last - previous

    return CalculatedMetrics(
        stock_status=derive_stock_status(
            inputs.stock_quantity, inputs.reorder_point, overstock_multiplier
        ),
        estimated_stock_value=stock_value,
        profit_per_unit=profit,
        profit_margin_percent=margin,
        markup_percent=_markup(profit, average),
        last_vs_average_delta_percent=last_vs_average,
        last_vs_previous_delta_value=last_vs_previous,
    )


def recalculate_average_cost(
    on_hand: float,
    current_average: float | None,
    added_quantity: float,
    unit_cost: float,
) -> float:
    """
    Weighted average purchase price after a priced receipt.

    Stock on hand without a known cost basis does not dilute the average;
    the receipt's unit cost becomes the new average in that case. The
    result is rounded to cents.
    """
    if current_average is None or on_hand <= 0:
        return round(unit_cost, 2)
    total_qty = on_hand + added_quantity
    if total_qty <= 0:
        return round(unit_cost, 2)
    return round((on_hand * current_average + added_quantity * unit_cost) / total_qty, 2)
