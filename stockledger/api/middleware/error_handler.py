"""
Error responses.

Every failure leaves the API as an ``ErrorResponse`` body: a stable
``error_code``, a readable ``message``, a ``hint`` for what to do next and,
for rejected adjustments and malformed request bodies, ``field_errors``
keyed by the form field that needs fixing.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockledger.application.dto.responses import ErrorResponse, FieldErrorResponse
from stockledger.config import get_logger
from stockledger.core.exceptions import (
    AdjustmentRejectedError,
    AdjustmentSessionClosedError,
    CategoryNotFoundError,
    ConfigurationError,
    DuplicateCategoryError,
    DuplicateItemError,
    InsufficientStockError,
    ItemNotFoundError,
    MalformedDraftError,
    StockledgerError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# First isinstance match wins: subclasses before their bases.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ItemNotFoundError: 404,
    CategoryNotFoundError: 404,
    DuplicateItemError: 409,
    DuplicateCategoryError: 409,
    InsufficientStockError: 409,
    AdjustmentSessionClosedError: 409,
    AdjustmentRejectedError: 422,
    MalformedDraftError: 422,
    ValidationError: 400,
    StorageError: 500,
    ConfigurationError: 500,
    ValueError: 400,
}

HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/inventory/items to list items.",
    "CATEGORY_NOT_FOUND": "Check the category ID and try GET /api/categories to list categories.",
    "DUPLICATE_ITEM": "Item names are unique regardless of case. Pick another name.",
    "DUPLICATE_CATEGORY": "Category names are unique regardless of case. Pick another name.",
    "INSUFFICIENT_STOCK": "Stock changed since the form was loaded. Reload the item and retry.",
    "ADJUSTMENT_REJECTED": "Fix the fields listed in field_errors and resubmit.",
    "MALFORMED_DRAFT": "Use one of the adjustment transaction types and its own fields.",
    "SESSION_COMPLETED": "Start a new adjustment for further changes.",
    "VALIDATION_ERROR": "Fix the fields listed in field_errors and resend.",
    "DATABASE_ERROR": "The inventory database could not complete the operation.",
}

# Used when neither the error code nor the exception has its own hint
STATUS_FALLBACK: dict[int, tuple[str, str]] = {
    400: ("BAD_REQUEST", "The request was understood but a value is not acceptable."),
    404: ("NOT_FOUND", "Nothing lives at this path."),
    405: ("METHOD_NOT_ALLOWED", "This path does not accept that HTTP method."),
    409: ("CONFLICT", "The request clashes with the current inventory state."),
    422: ("UNPROCESSABLE_ENTITY", "The request body could not be used as sent."),
    500: ("INTERNAL_ERROR", "Something failed on the server; see the logs."),
}


def _get_hint(error_code: str, status_code: int) -> str:
    if error_code in HINT_MAP:
        return HINT_MAP[error_code]
    return STATUS_FALLBACK.get(status_code, ("", ""))[1]


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return 500


def _json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Render any exception as an ``ErrorResponse`` and log it."""
    status_code = _status_for(exc)

    if isinstance(exc, StockledgerError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = type(exc).__name__, str(exc)

    field_errors = None
    if isinstance(exc, AdjustmentRejectedError):
        field_errors = [
            FieldErrorResponse(field=e.field, message=e.message, max_allowed=e.max_allowed)
            for e in exc.errors
        ]

    server_side = status_code >= 500
    (logger.error if server_side else logger.warning)(
        "request_failed",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        status_code=status_code,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if server_side else None,
    )

    return _json(
        status_code,
        ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            field_errors=field_errors,
            path=request.url.path,
        ),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler below picked up."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def _field_name(loc: tuple) -> str:
    # ("body", "draft", "quantity") -> "draft.quantity"
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain, request-validation and HTTP error handlers."""

    @app.exception_handler(StockledgerError)
    async def domain_exception_handler(
        request: Request, exc: StockledgerError
    ) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        field_errors = [
            FieldErrorResponse(field=_field_name(err["loc"]), message=err["msg"])
            for err in exc.errors()
        ]
        logger.info(
            "request_rejected",
            path=request.url.path,
            fields=[e.field for e in field_errors],
        )
        return _json(
            422,
            ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
                detail="; ".join(f"{e.field}: {e.message}" for e in field_errors),
                field_errors=field_errors,
                path=request.url.path,
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        error_code, hint = STATUS_FALLBACK.get(exc.status_code, ("HTTP_ERROR", ""))
        return _json(
            exc.status_code,
            ErrorResponse(
                error_code=error_code,
                message=str(exc.detail or "Request failed"),
                hint=hint,
                path=request.url.path,
            ),
        )
