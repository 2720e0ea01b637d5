"""Stock adjustment drafts, field errors and the normalized request.

A draft is one of four variants, split by direction (increase/decrease)
and by whether the transaction type carries prices. The variant is picked
from ``transaction_type``, so a draft can never hold a price pair for a
type that has none.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from stockledger.core.entities.inventory import Direction, TransactionType


class EditedField(str, Enum):
    """Numeric fields that take part in price reconciliation."""

    QUANTITY = "quantity"
    UNIT_PRICE = "unit_price"
    TOTAL_PRICE = "total_price"


class _DraftBase(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    direction: ClassVar[Direction]
    priced: ClassVar[bool]

    quantity: float | None = None
    reference_number: str | None = None
    reason: str | None = None
    transaction_date: datetime = Field(default_factory=datetime.utcnow)
    last_edited: EditedField | None = None


class _PricedDraftBase(_DraftBase):
    unit_price: float | None = None
    total_price: float | None = None


class PricedIncreaseDraft(_PricedDraftBase):
    direction: ClassVar[Direction] = Direction.INCREASE
    priced: ClassVar[bool] = True

    transaction_type: Literal[TransactionType.PURCHASE, TransactionType.RETURN]


class UnpricedIncreaseDraft(_DraftBase):
    direction: ClassVar[Direction] = Direction.INCREASE
    priced: ClassVar[bool] = False

    transaction_type: Literal[
        TransactionType.CORRECTION_ADD, TransactionType.OTHER_ADDITION
    ]


class PricedDecreaseDraft(_PricedDraftBase):
    direction: ClassVar[Direction] = Direction.DECREASE
    priced: ClassVar[bool] = True

    transaction_type: Literal[
        TransactionType.SALE,
        TransactionType.DAMAGED,
        TransactionType.LOSS,
        TransactionType.EXPIRED,
    ]


class UnpricedDecreaseDraft(_DraftBase):
    direction: ClassVar[Direction] = Direction.DECREASE
    priced: ClassVar[bool] = False

    transaction_type: Literal[
        TransactionType.CORRECTION_REMOVE, TransactionType.OTHER_REMOVAL
    ]


PricedDraft = PricedIncreaseDraft | PricedDecreaseDraft

StockAdjustmentDraft = Annotated[
    PricedIncreaseDraft
    | UnpricedIncreaseDraft
    | PricedDecreaseDraft
    | UnpricedDecreaseDraft,
    Field(discriminator="transaction_type"),
]


class FieldError(BaseModel):
    """A validation failure scoped to one draft field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    max_allowed: float | None = None


class StockAdjustmentRequest(BaseModel):
    """Validated adjustment payload handed to the persistence boundary.

    Carries the unsigned quantity and its direction; the consumer derives
    the signed stock change.
    """

    model_config = ConfigDict(frozen=True)

    transaction_type: TransactionType
    direction: Direction
    quantity: float = Field(..., gt=0)
    unit_price: float | None = Field(default=None, ge=0)
    total_price: float | None = Field(default=None, ge=0)
    reference_number: str | None = None
    reason: str | None = None
    transaction_date: datetime


class AdjustmentValidationResult(BaseModel):
    """Either a request or the field errors that blocked it."""

    request: StockAdjustmentRequest | None = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.request is not None and not self.errors

    def errors_by_field(self) -> dict[str, str]:
        return {e.field: e.message for e in self.errors}


class AdjustmentSessionState(str, Enum):
    """Lifecycle of one adjustment form session."""

    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
