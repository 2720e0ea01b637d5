"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.inventory_store import ICategoryStore, IInventoryStore

__all__ = [
    # Storage interfaces
    "IInventoryStore",
    "ICategoryStore",
]
