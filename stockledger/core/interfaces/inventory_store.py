"""Abstract interfaces for inventory and category storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.core.entities.category import Category
from stockledger.core.entities.inventory import (
    InventoryItem,
    StockTransaction,
    TransactionType,
)


class IInventoryStore(ABC):
    """Interface for inventory item and stock transaction persistence."""

    @abstractmethod
    async def create_item(
        self,
        item: InventoryItem,
        opening_stock: StockTransaction | None = None,
    ) -> InventoryItem:
        """
        Create a new inventory item.

        ``opening_stock`` (an ``initial-stock`` transaction) is written in
        the same database transaction; its ``item_id`` is replaced by the
        new item's id.
        """
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID, with its category name."""
        pass

    @abstractmethod
    async def get_item_by_name(self, name: str) -> InventoryItem | None:
        """Get inventory item by name (case-insensitive)."""
        pass

    @abstractmethod
    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Update descriptive and pricing fields. Stock is not touched."""
        pass

    @abstractmethod
    async def update_reorder_point(
        self, item_id: int, reorder_point: int | None
    ) -> InventoryItem | None:
        """Set only the reorder point. Returns None if the item is missing."""
        pass

    @abstractmethod
    async def list_items(
        self,
        limit: int = 100,
        offset: int = 0,
        category_id: int | None = None,
        search: str | None = None,
        low_stock_only: bool = False,
    ) -> list[InventoryItem]:
        """List inventory items ordered by name."""
        pass

    @abstractmethod
    async def count_items(
        self,
        category_id: int | None = None,
        search: str | None = None,
        low_stock_only: bool = False,
    ) -> int:
        """Count items matching the same filters as ``list_items``."""
        pass

    @abstractmethod
    async def delete_items(self, item_ids: list[int]) -> int:
        """Delete items (and their transactions). Returns rows deleted."""
        pass

    @abstractmethod
    async def record_adjustment(
        self, transaction: StockTransaction
    ) -> tuple[StockTransaction, InventoryItem]:
        """
        Apply a signed stock change and append its transaction atomically.

        The stock update is guarded so the quantity never drops below zero.
        Purchases and opening stock with a unit price also move the weighted
        average and last purchase price, computed from the row being updated.

        Raises:
            ItemNotFoundError: No item with ``transaction.item_id``.
            InsufficientStockError: The guard rejected the change.
        """
        pass

    @abstractmethod
    async def get_transactions(
        self,
        item_id: int,
        transaction_types: list[TransactionType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockTransaction]:
        """Transaction history for an item, newest first."""
        pass

    @abstractmethod
    async def count_transactions(
        self,
        item_id: int,
        transaction_types: list[TransactionType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> int:
        """Count history rows matching the same filters."""
        pass

    @abstractmethod
    async def get_recent_purchase_prices(
        self, item_id: int, limit: int = 2
    ) -> list[float]:
        """Unit prices of the latest cost-basis receipts, most recently recorded first."""
        pass


class ICategoryStore(ABC):
    """Interface for category persistence."""

    @abstractmethod
    async def create_category(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        pass

    @abstractmethod
    async def get_category_by_name(self, name: str) -> Category | None:
        """Get category by name (case-insensitive)."""
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """All categories ordered by name."""
        pass

    @abstractmethod
    async def update_category(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def delete_category(self, category_id: int) -> bool:
        """Delete a category. Items keep existing without a category."""
        pass
