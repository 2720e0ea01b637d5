"""
Stock adjustment reconciler.

Pure reducer over adjustment drafts. Keeps ``total = quantity * unit price``
in step while the user edits one of the three numbers, and turns a finished
draft into either a normalized request or a list of field errors.

Monetary values recomputed here are rounded to 2 decimal places at every
step, so repeated edits do not accumulate float drift. Values typed by the
user are stored as given.
"""

from datetime import datetime
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from stockledger.core.entities.adjustment import (
    AdjustmentValidationResult,
    EditedField,
    FieldError,
    StockAdjustmentDraft,
    StockAdjustmentRequest,
)
from stockledger.core.entities.inventory import (
    Direction,
    TransactionType,
    requires_price,
    requires_reason,
)
from stockledger.core.exceptions import MalformedDraftError

MAX_REFERENCE_LENGTH = 50
MAX_REASON_LENGTH = 255

_draft_adapter: TypeAdapter[StockAdjustmentDraft] = TypeAdapter(StockAdjustmentDraft)


def _money(value: float) -> float:
    return round(value, 2)


def _build(data: dict[str, Any]) -> StockAdjustmentDraft:
    try:
        return _draft_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise MalformedDraftError(
            "; ".join(err["msg"] for err in e.errors()),
            draft_kind=str(data.get("transaction_type")),
        ) from e


def _replace(draft: StockAdjustmentDraft, **changes: Any) -> StockAdjustmentDraft:
    # model_copy skips validation; rebuild so NaN/inf never get in
    return _build({**draft.model_dump(), **changes})


def new_draft(
    transaction_type: TransactionType | str,
    *,
    quantity: float | None = None,
    unit_price: float | None = None,
    total_price: float | None = None,
    reference_number: str | None = None,
    reason: str | None = None,
    transaction_date: datetime | None = None,
) -> StockAdjustmentDraft:
    """
    Create an empty (or pre-filled) draft of the variant matching the type.

    Raises:
        MalformedDraftError: Unknown type, ``initial-stock``, or prices
            passed for a type that carries none.
    """
    try:
        tx_type = TransactionType(transaction_type)
    except ValueError as e:
        raise MalformedDraftError(
            f"unknown transaction type {transaction_type!r}"
        ) from e
    if tx_type is TransactionType.INITIAL_STOCK:
        raise MalformedDraftError(
            "initial-stock is recorded on item creation only",
            draft_kind=tx_type.value,
        )

    data: dict[str, Any] = {
        "transaction_type": tx_type,
        "quantity": quantity,
        "reference_number": reference_number,
        "reason": reason,
    }
    if transaction_date is not None:
        data["transaction_date"] = transaction_date

    if requires_price(tx_type):
        data["unit_price"] = unit_price
        data["total_price"] = total_price
    elif unit_price is not None or total_price is not None:
        raise MalformedDraftError(
            f"{tx_type.value} adjustments carry no prices",
            draft_kind=tx_type.value,
        )
    return _build(data)


def change_transaction_type(
    draft: StockAdjustmentDraft,
    transaction_type: TransactionType | str,
) -> StockAdjustmentDraft:
    """
    Switch a draft to another transaction type.

    Quantity, reference, reason and date survive the switch. Prices survive
    only when both the old and the new type are priced.
    """
    try:
        target = TransactionType(transaction_type)
    except ValueError as e:
        raise MalformedDraftError(
            f"unknown transaction type {transaction_type!r}"
        ) from e
    carry_prices = draft.priced and requires_price(target)
    switched = new_draft(
        target,
        quantity=draft.quantity,
        unit_price=draft.unit_price if carry_prices else None,
        total_price=draft.total_price if carry_prices else None,
        reference_number=draft.reference_number,
        reason=draft.reason,
        transaction_date=draft.transaction_date,
    )
    last_edited = draft.last_edited
    if not switched.priced and last_edited is not EditedField.QUANTITY:
        last_edited = None
    return _replace(switched, last_edited=last_edited)


def _clamp_quantity(
    draft: StockAdjustmentDraft, quantity: float | None, current_stock: float | None
) -> float | None:
    if (
        quantity is not None
        and current_stock is not None
        and draft.direction is Direction.DECREASE
        and quantity > current_stock
    ):
        return max(float(current_stock), 0.0)
    return quantity


def reconcile(
    draft: StockAdjustmentDraft,
    field: EditedField | str,
    value: float | None,
    current_stock: float | None = None,
) -> StockAdjustmentDraft:
    """
    Apply one numeric edit and recompute the dependent field.

    Args:
        draft: Draft before the edit.
        field: Which of quantity, unit_price, total_price was edited.
        value: New value, or None when the field was cleared.
        current_stock: Stock on hand; decrease drafts clamp quantity to it.

    Returns:
        New draft. The input draft is not modified.

    Raises:
        MalformedDraftError: Unknown field, or a price edit on a draft
            whose type carries no prices.
    """
    try:
        edited = EditedField(field)
    except ValueError as e:
        raise MalformedDraftError(
            f"unknown field {field!r}", draft_kind=draft.transaction_type.value
        ) from e

    if edited is EditedField.QUANTITY:
        quantity = _clamp_quantity(draft, value, current_stock)
        if not draft.priced:
            return _replace(draft, quantity=quantity, last_edited=edited)

        unit_price = draft.unit_price
        total_price = draft.total_price
        if unit_price is not None:
            total_price = _money(quantity * unit_price) if quantity is not None else None
        elif total_price is not None and quantity:
            unit_price = _money(total_price / quantity)
        return _replace(
            draft,
            quantity=quantity,
            unit_price=unit_price,
            total_price=total_price,
            last_edited=edited,
        )

    if not draft.priced:
        raise MalformedDraftError(
            f"{draft.transaction_type.value} adjustments carry no {edited.value}",
            draft_kind=draft.transaction_type.value,
        )

    quantity = draft.quantity
    if edited is EditedField.UNIT_PRICE:
        total_price = draft.total_price
        if value is None:
            total_price = None
        elif quantity is not None:
            total_price = _money(quantity * value)
        return _replace(
            draft, unit_price=value, total_price=total_price, last_edited=edited
        )

    unit_price = draft.unit_price
    if value is not None:
        # no quantity to divide by: leave the unit price unset, never inf
        unit_price = _money(value / quantity) if quantity else None
    return _replace(draft, total_price=value, unit_price=unit_price, last_edited=edited)


def _blank(text: str | None) -> bool:
    return text is None or not text.strip()


def _stripped(text: str | None) -> str | None:
    return None if _blank(text) else text.strip()


def validate_draft(
    draft: StockAdjustmentDraft,
    current_stock: float,
    *,
    max_reference_length: int = MAX_REFERENCE_LENGTH,
    max_reason_length: int = MAX_REASON_LENGTH,
) -> list[FieldError]:
    """
    Run every submit-time check and collect field errors.

    Checks run in a fixed order and each field reports at most one error,
    the first one that fired.
    """
    errors: dict[str, FieldError] = {}

    def fail(field: str, message: str, max_allowed: float | None = None) -> None:
        errors.setdefault(
            field, FieldError(field=field, message=message, max_allowed=max_allowed)
        )

    quantity = draft.quantity
    is_decrease = draft.direction is Direction.DECREASE

    if quantity is None or quantity <= 0:
        fail("quantity", "Quantity must be greater than 0")
    elif is_decrease and quantity > current_stock:
        fail(
            "quantity",
            f"Quantity cannot exceed current stock ({current_stock:g})",
            max_allowed=current_stock,
        )

    if draft.priced:
        if draft.unit_price is None and draft.total_price is None:
            fail("unit_price", "Unit price or total price is required")
        if draft.unit_price is not None and draft.unit_price < 0:
            fail("unit_price", "Unit price cannot be negative")
        if draft.total_price is not None and draft.total_price < 0:
            fail("total_price", "Total price cannot be negative")

    if requires_reason(draft.transaction_type) and _blank(draft.reason):
        fail("reason", "Reason is required for this transaction type")

    if is_decrease and quantity is not None and current_stock - quantity < 0:
        fail(
            "quantity",
            "Resulting stock cannot be negative",
            max_allowed=current_stock,
        )

    if draft.reference_number and len(draft.reference_number) > max_reference_length:
        fail(
            "reference_number",
            f"Reference number must be at most {max_reference_length} characters",
        )
    if draft.reason and len(draft.reason) > max_reason_length:
        fail("reason", f"Reason must be at most {max_reason_length} characters")

    return list(errors.values())


def prepare_submission(
    draft: StockAdjustmentDraft,
    current_stock: float,
    *,
    max_reference_length: int = MAX_REFERENCE_LENGTH,
    max_reason_length: int = MAX_REASON_LENGTH,
) -> AdjustmentValidationResult:
    """
    Validate a draft and build the request payload.

    Returns:
        A result holding either the request or the field errors, never both.
    """
    errors = validate_draft(
        draft,
        current_stock,
        max_reference_length=max_reference_length,
        max_reason_length=max_reason_length,
    )
    if errors:
        return AdjustmentValidationResult(errors=errors)

    quantity = draft.quantity
    unit_price: float | None = None
    total_price: float | None = None
    if draft.priced:
        unit_price = draft.unit_price
        total_price = draft.total_price
        if unit_price is None:
            unit_price = _money(total_price / quantity)
        if total_price is None:
            total_price = _money(quantity * unit_price)

    request = StockAdjustmentRequest(
        transaction_type=draft.transaction_type,
        direction=draft.direction,
        quantity=quantity,
        unit_price=unit_price,
        total_price=total_price,
        reference_number=_stripped(draft.reference_number),
        reason=_stripped(draft.reason),
        transaction_date=draft.transaction_date,
    )
    return AdjustmentValidationResult(request=request)
