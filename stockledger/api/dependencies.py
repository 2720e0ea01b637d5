"""
Dependency injection container for FastAPI.

Provides stores and use case instances to route handlers. Tests swap any
of these through ``app.dependency_overrides``.
"""

from fastapi import Header

from stockledger.application.use_cases import (
    AdjustStockUseCase,
    CreateItemUseCase,
    DeleteItemsUseCase,
    GetItemMetricsUseCase,
    ManageCategoriesUseCase,
    UpdateItemUseCase,
)
from stockledger.config import Settings, get_settings
from stockledger.core.interfaces import ICategoryStore, IInventoryStore
from stockledger.infrastructure.storage.sqlite import (
    get_category_store,
    get_inventory_store,
)


def get_app_settings() -> Settings:
    """Get application settings (reset_settings() takes effect here too)."""
    return get_settings()


# Store dependencies
async def get_item_store() -> IInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


async def get_cat_store() -> ICategoryStore:
    """Get category store."""
    return await get_category_store()


def get_actor(x_actor: str | None = Header(default=None)) -> str | None:
    """Who is making the change, taken from the optional X-Actor header."""
    if x_actor is None:
        return None
    return x_actor.strip() or None


# Use case dependencies
def get_create_item_use_case() -> CreateItemUseCase:
    return CreateItemUseCase()


def get_update_item_use_case() -> UpdateItemUseCase:
    """Get update item use case."""
    return UpdateItemUseCase()


def get_delete_items_use_case() -> DeleteItemsUseCase:
    return DeleteItemsUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


def get_item_metrics_use_case() -> GetItemMetricsUseCase:
    return GetItemMetricsUseCase()


def get_manage_categories_use_case() -> ManageCategoriesUseCase:
    """Get category management use case."""
    return ManageCategoriesUseCase()
