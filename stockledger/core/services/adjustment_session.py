"""
Adjustment session state machine.

One session backs one open adjustment form for one item:

    editing -> validating -> submitting -> success
                   |              |
                   +-> editing    +-> editing (form error)

A rejected or failed submission always lands back in ``editing`` with the
draft untouched, so the user can fix it and resubmit. ``success`` is
terminal. Sessions share nothing; two forms for the same item are two
independent sessions.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from stockledger.config import get_logger
from stockledger.core.entities.adjustment import (
    AdjustmentSessionState,
    AdjustmentValidationResult,
    EditedField,
    FieldError,
    StockAdjustmentDraft,
    StockAdjustmentRequest,
)
from stockledger.core.entities.inventory import TransactionType
from stockledger.core.exceptions import (
    AdjustmentSessionClosedError,
    InsufficientStockError,
    StockledgerError,
)
from stockledger.core.services.adjustment_reconciler import (
    MAX_REASON_LENGTH,
    MAX_REFERENCE_LENGTH,
    change_transaction_type,
    new_draft,
    prepare_submission,
    reconcile,
    validate_draft,
)

logger = get_logger(__name__)

Submitter = Callable[[StockAdjustmentRequest], Awaitable[Any]]


class AdjustmentSession:
    """Draft, stock snapshot and errors of one adjustment form."""

    def __init__(
        self,
        item_id: int,
        current_stock: float,
        transaction_type: TransactionType | str = TransactionType.PURCHASE,
        max_reference_length: int = MAX_REFERENCE_LENGTH,
        max_reason_length: int = MAX_REASON_LENGTH,
    ) -> None:
        self.item_id = item_id
        self._current_stock = current_stock
        self._draft: StockAdjustmentDraft = new_draft(transaction_type)
        self._state = AdjustmentSessionState.EDITING
        self._field_errors: list[FieldError] = []
        self._form_error: str | None = None
        self._max_reference_length = max_reference_length
        self._max_reason_length = max_reason_length
        self.result: Any = None

    @property
    def state(self) -> AdjustmentSessionState:
        return self._state

    @property
    def draft(self) -> StockAdjustmentDraft:
        return self._draft

    @property
    def current_stock(self) -> float:
        return self._current_stock

    @property
    def field_errors(self) -> list[FieldError]:
        return list(self._field_errors)

    @property
    def form_error(self) -> str | None:
        return self._form_error

    def errors_by_field(self) -> dict[str, str]:
        return {e.field: e.message for e in self._field_errors}

    def _ensure_open(self) -> None:
        if self._state is AdjustmentSessionState.SUCCESS:
            raise AdjustmentSessionClosedError(self.item_id)

    def _touch(self, *fields: str) -> None:
        self._field_errors = [e for e in self._field_errors if e.field not in fields]
        self._form_error = None

    # Editing

    def edit(self, field: EditedField | str, value: float | None) -> StockAdjustmentDraft:
        """Apply a numeric edit; the dependent price field is recomputed."""
        self._ensure_open()
        self._draft = reconcile(self._draft, field, value, self._current_stock)
        self._touch(*(f.value for f in EditedField))
        return self._draft

    def set_reason(self, reason: str | None) -> None:
        self._ensure_open()
        self._draft = self._draft.model_copy(update={"reason": reason})
        self._touch("reason")

    def set_reference(self, reference_number: str | None) -> None:
        self._ensure_open()
        self._draft = self._draft.model_copy(update={"reference_number": reference_number})
        self._touch("reference_number")

    def set_date(self, transaction_date: datetime) -> None:
        self._ensure_open()
        self._draft = self._draft.model_copy(update={"transaction_date": transaction_date})

    def change_type(self, transaction_type: TransactionType | str) -> StockAdjustmentDraft:
        self._ensure_open()
        self._draft = change_transaction_type(self._draft, transaction_type)
        self._field_errors = []
        self._form_error = None
        return self._draft

    def refresh_stock(self, current_stock: float) -> None:
        """Take a fresh stock reading. Existing field errors are re-checked."""
        self._current_stock = current_stock
        if self._field_errors:
            self._field_errors = validate_draft(
                self._draft,
                current_stock,
                max_reference_length=self._max_reference_length,
                max_reason_length=self._max_reason_length,
            )

    # Submission

    async def submit(self, submitter: Submitter) -> AdjustmentValidationResult:
        """
        Validate the draft and hand the request to ``submitter``.

        Field errors stop the submission before ``submitter`` is called.
        Domain errors raised by ``submitter`` become the form error; an
        ``InsufficientStockError`` also refreshes the stock reading and
        re-validates, so the quantity field shows the new maximum. Other
        exceptions are recorded the same way and re-raised.

        Returns:
            The validation result. On success the submitter's return value
            is kept on ``self.result``.
        """
        self._ensure_open()
        self._state = AdjustmentSessionState.VALIDATING
        self._form_error = None

        validation = prepare_submission(
            self._draft,
            self._current_stock,
            max_reference_length=self._max_reference_length,
            max_reason_length=self._max_reason_length,
        )
        if not validation.is_valid:
            self._field_errors = list(validation.errors)
            self._state = AdjustmentSessionState.EDITING
            logger.debug(
                "adjustment_rejected",
                item_id=self.item_id,
                fields=[e.field for e in validation.errors],
            )
            return validation

        self._field_errors = []
        self._state = AdjustmentSessionState.SUBMITTING
        try:
            self.result = await submitter(validation.request)
        except InsufficientStockError as e:
            self._fail(e.message)
            self.refresh_stock(e.details.get("available", self._current_stock))
            self._field_errors = validate_draft(
                self._draft,
                self._current_stock,
                max_reference_length=self._max_reference_length,
                max_reason_length=self._max_reason_length,
            )
            return validation
        except StockledgerError as e:
            self._fail(e.message)
            return validation
        except Exception as e:
            self._fail(str(e))
            raise

        self._state = AdjustmentSessionState.SUCCESS
        logger.info(
            "adjustment_submitted",
            item_id=self.item_id,
            transaction_type=validation.request.transaction_type.value,
            quantity=validation.request.quantity,
        )
        return validation

    def _fail(self, message: str) -> None:
        self._form_error = message
        self._state = AdjustmentSessionState.EDITING
        logger.warning("adjustment_submit_failed", item_id=self.item_id, error=message)
