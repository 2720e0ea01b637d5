"""Storage infrastructure implementations."""

from stockledger.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteInventoryStore,
    close_pool,
    get_category_store,
    get_connection,
    get_inventory_store,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInventoryStore",
    "SQLiteCategoryStore",
    "get_inventory_store",
    "get_category_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
