"""
Domain exceptions for the Stockledger application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockledgerError(Exception):
    """Base exception for all Stockledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(StockledgerError):
    """Base exception for storage operations."""

    pass


class ItemNotFoundError(StorageError):
    """Inventory item not found in storage."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Inventory item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class CategoryNotFoundError(StorageError):
    """Category not found in storage."""

    def __init__(self, category_id: int):
        super().__init__(
            f"Category not found: {category_id}",
            code="CATEGORY_NOT_FOUND",
            details={"category_id": category_id},
        )


class DuplicateItemError(StorageError):
    """An item with the same name already exists."""

    def __init__(self, name: str, existing_id: int | None = None):
        super().__init__(
            f"Item name already exists: {name}",
            code="DUPLICATE_ITEM",
            details={"name": name, "existing_id": existing_id},
        )


class DuplicateCategoryError(StorageError):
    """A category with the same name already exists."""

    def __init__(self, name: str, existing_id: int | None = None):
        super().__init__(
            f'Category with name "{name}" already exists',
            code="DUPLICATE_CATEGORY",
            details={"name": name, "existing_id": existing_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class InsufficientStockError(StockledgerError):
    """Stock on hand cannot cover a decrease."""

    def __init__(self, item_id: int, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for item {item_id}: "
            f"requested {requested:g}, available {available:g}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )


# Validation Exceptions
class ValidationError(StockledgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class AdjustmentRejectedError(ValidationError):
    """A stock adjustment draft failed one or more field checks."""

    def __init__(self, item_id: int, errors: list[Any]):
        first = errors[0] if errors else None
        super().__init__(
            field=getattr(first, "field", "draft"),
            message=getattr(first, "message", "Adjustment rejected"),
        )
        self.code = "ADJUSTMENT_REJECTED"
        self.message = f"Stock adjustment for item {item_id} rejected"
        self.args = (self.message,)
        self.errors = list(errors)
        self.details.update(
            {
                "item_id": item_id,
                "field_errors": [
                    {"field": e.field, "message": e.message} for e in self.errors
                ],
            }
        )


class MalformedDraftError(StockledgerError):
    """Reconciler input has a shape no draft variant accepts."""

    def __init__(self, reason: str, draft_kind: str | None = None):
        super().__init__(
            f"Malformed adjustment draft: {reason}",
            code="MALFORMED_DRAFT",
            details={"reason": reason, "draft_kind": draft_kind},
        )


class AdjustmentSessionClosedError(StockledgerError):
    """An adjustment session was used after it completed."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Adjustment session for item {item_id} already completed",
            code="SESSION_COMPLETED",
            details={"item_id": item_id},
        )


class ConfigurationError(StockledgerError):
    """Configuration error."""

    pass
