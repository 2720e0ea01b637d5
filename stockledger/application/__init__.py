"""
Application layer - Use cases, DTOs and entity mappers.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores
3. Publishing mutation events once a write has succeeded

Use cases are the entry point for mutating API handlers.
"""

from stockledger.application.use_cases import (
    AdjustStockResult,
    AdjustStockUseCase,
    CreateItemUseCase,
    DeleteItemsUseCase,
    GetItemMetricsUseCase,
    ManageCategoriesUseCase,
    UpdateItemUseCase,
)

__all__ = [
    "AdjustStockUseCase",
    "AdjustStockResult",
    "CreateItemUseCase",
    "UpdateItemUseCase",
    "DeleteItemsUseCase",
    "GetItemMetricsUseCase",
    "ManageCategoriesUseCase",
]
