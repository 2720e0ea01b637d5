"""Derived inventory metrics.

``None`` in any output field means the value is unavailable because an
input it depends on is missing. Markup is the only field with a second
sentinel: ``UNBOUNDED`` when the cost basis is zero and the item sells
at a profit.
"""

from enum import Enum
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field

UNBOUNDED: Final = "unbounded"

MarkupValue = float | Literal["unbounded"] | None


class StockStatus(str, Enum):
    """Stock level classification relative to the reorder point."""

    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"
    OVER_STOCKED = "over_stocked"


class MetricInputs(BaseModel):
    """Raw item fields the calculator works from."""

    model_config = ConfigDict(allow_inf_nan=False, frozen=True)

    stock_quantity: float = Field(..., ge=0)
    selling_price: float | None = Field(default=None, ge=0)
    average_purchase_price: float | None = Field(default=None, ge=0)
    last_purchase_price: float | None = Field(default=None, ge=0)
    second_last_purchase_price: float | None = Field(default=None, ge=0)
    reorder_point: int | None = Field(default=None, ge=0)


class CalculatedMetrics(BaseModel):
    """Read-only metrics snapshot for one render."""

    model_config = ConfigDict(frozen=True)

    stock_status: StockStatus
    estimated_stock_value: float
    profit_per_unit: float | None = None
    profit_margin_percent: float | None = None
    markup_percent: MarkupValue = None
    last_vs_average_delta_percent: float | None = None
    last_vs_previous_delta_value: float | None = None

    @property
    def markup_unbounded(self) -> bool:
        return self.markup_percent == UNBOUNDED
