"""
Stock adjustment form endpoints.

Stateless helpers that let a form keep quantity, unit price and total in
step while the user types. Nothing here touches the database; submitting
goes through ``POST /api/inventory/items/{item_id}/stock``.
"""

from fastapi import APIRouter

from stockledger.application.dto.requests import (
    ChangeDraftTypeRequest,
    ReconcileDraftRequest,
    ValidateDraftRequest,
)
from stockledger.application.dto.responses import (
    DraftValidationResponse,
    ErrorResponse,
    FieldErrorResponse,
    ReconcileDraftResponse,
)
from stockledger.config import get_settings
from stockledger.core.services.adjustment_reconciler import (
    change_transaction_type,
    prepare_submission,
    reconcile,
)

router = APIRouter(prefix="/api/inventory/adjustments", tags=["adjustments"])


@router.post(
    "/reconcile",
    response_model=ReconcileDraftResponse,
    responses={422: {"model": ErrorResponse}},
)
async def reconcile_draft(request: ReconcileDraftRequest) -> ReconcileDraftResponse:
    """Apply one numeric edit and return the draft with its dependent field recomputed."""
    draft = reconcile(request.draft, request.field, request.value, request.current_stock)
    return ReconcileDraftResponse(draft=draft)


@router.post(
    "/change-type",
    response_model=ReconcileDraftResponse,
    responses={422: {"model": ErrorResponse}},
)
async def change_draft_type(request: ChangeDraftTypeRequest) -> ReconcileDraftResponse:
    draft = change_transaction_type(request.draft, request.transaction_type)
    return ReconcileDraftResponse(draft=draft)


@router.post("/validate", response_model=DraftValidationResponse)
async def validate_draft(request: ValidateDraftRequest) -> DraftValidationResponse:
    """Dry-run the submit checks and return the normalized request or the field errors."""
    limits = get_settings().inventory
    result = prepare_submission(
        request.draft,
        request.current_stock,
        max_reference_length=limits.max_reference_length,
        max_reason_length=limits.max_reason_length,
    )
    return DraftValidationResponse(
        valid=result.is_valid,
        field_errors=[
            FieldErrorResponse(field=e.field, message=e.message, max_allowed=e.max_allowed)
            for e in result.errors
        ],
        request=result.request,
    )
