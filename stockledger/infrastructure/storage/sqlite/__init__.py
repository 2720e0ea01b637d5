"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.category_store import SQLiteCategoryStore
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_category_store: SQLiteCategoryStore | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_category_store() -> SQLiteCategoryStore:
    """Get singleton category store instance."""
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteCategoryStore",
    # Factory functions
    "get_inventory_store",
    "get_category_store",
]
