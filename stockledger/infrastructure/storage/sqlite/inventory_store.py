"""SQLite implementation of inventory storage."""

from datetime import datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import (
    COST_BASIS_TYPES,
    InventoryItem,
    StockTransaction,
    TransactionType,
)
from stockledger.core.exceptions import (
    CategoryNotFoundError,
    DatabaseError,
    DuplicateItemError,
    InsufficientStockError,
    ItemNotFoundError,
)
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.metrics_calculator import recalculate_average_cost
from stockledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

_ITEM_SELECT = """
    SELECT i.*, c.name AS category_name
    FROM inventory_items i
    LEFT JOIN categories c ON c.id = i.category_id
"""


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp column; None for empty or unreadable values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        logger.warning("unreadable_timestamp", value=value)
        return None


def _integrity_error(e: aiosqlite.IntegrityError, item: InventoryItem) -> Exception:
    message = str(e)
    if "UNIQUE" in message:
        return DuplicateItemError(item.name)
    if "FOREIGN KEY" in message and item.category_id is not None:
        return CategoryNotFoundError(item.category_id)
    return DatabaseError("item write", message)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory item and stock transaction storage."""

    async def create_item(
        self,
        item: InventoryItem,
        opening_stock: StockTransaction | None = None,
    ) -> InventoryItem:
        """Create a new inventory item, with its opening stock transaction."""
        now = datetime.utcnow()
        item.created_at = now
        item.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO inventory_items (
                        name, unit, description, category_id, stock_quantity,
                        reorder_point, selling_price, average_purchase_price,
                        last_purchase_price, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.name,
                        item.unit,
                        item.description,
                        item.category_id,
                        item.stock_quantity,
                        item.reorder_point,
                        item.selling_price,
                        item.average_purchase_price,
                        item.last_purchase_price,
                        item.created_at.isoformat(),
                        item.updated_at.isoformat(),
                    ),
                )
                item.id = cursor.lastrowid
                if opening_stock is not None:
                    await self._insert_transaction(
                        conn, opening_stock.model_copy(update={"item_id": item.id})
                    )
        except aiosqlite.IntegrityError as e:
            raise _integrity_error(e, item) from e

        logger.info(
            "inventory_item_created",
            item_id=item.id,
            name=item.name,
            opening_stock=item.stock_quantity,
        )
        return await self.get_item(item.id) or item

    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(f"{_ITEM_SELECT} WHERE i.id = ?", (item_id,))
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def get_item_by_name(self, name: str) -> InventoryItem | None:
        """Get inventory item by name, ignoring case."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"{_ITEM_SELECT} WHERE i.name = ? COLLATE NOCASE", (name.strip(),)
            )
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Update descriptive and pricing fields."""
        item.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE inventory_items SET
                        name = ?,
                        unit = ?,
                        description = ?,
                        category_id = ?,
                        reorder_point = ?,
                        selling_price = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        item.name,
                        item.unit,
                        item.description,
                        item.category_id,
                        item.reorder_point,
                        item.selling_price,
                        item.updated_at.isoformat(),
                        item.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise ItemNotFoundError(item.id)
        except aiosqlite.IntegrityError as e:
            raise _integrity_error(e, item) from e

        logger.info("inventory_item_updated", item_id=item.id)
        return await self.get_item(item.id) or item

    async def update_reorder_point(
        self, item_id: int, reorder_point: int | None
    ) -> InventoryItem | None:
        """Set only the reorder point."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE inventory_items SET reorder_point = ?, updated_at = ? WHERE id = ?",
                (reorder_point, datetime.utcnow().isoformat(), item_id),
            )
            if cursor.rowcount == 0:
                return None
        logger.info("reorder_point_updated", item_id=item_id, reorder_point=reorder_point)
        return await self.get_item(item_id)

    @staticmethod
    def _item_filters(
        category_id: int | None,
        search: str | None,
        low_stock_only: bool,
    ) -> tuple[str, list]:
        clauses: list[str] = []
        params: list = []
        if category_id is not None:
            clauses.append("i.category_id = ?")
            params.append(category_id)
        if search:
            clauses.append("(i.name LIKE ? OR i.description LIKE ?)")
            pattern = f"%{search.strip()}%"
            params.extend([pattern, pattern])
        if low_stock_only:
            clauses.append(
                "i.reorder_point IS NOT NULL AND i.stock_quantity <= i.reorder_point"
            )
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    async def list_items(
        self,
        limit: int = 100,
        offset: int = 0,
        category_id: int | None = None,
        search: str | None = None,
        low_stock_only: bool = False,
    ) -> list[InventoryItem]:
        """List inventory items with pagination and filters."""
        where, params = self._item_filters(category_id, search, low_stock_only)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"{_ITEM_SELECT} {where} ORDER BY i.name COLLATE NOCASE LIMIT ? OFFSET ?",
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def count_items(
        self,
        category_id: int | None = None,
        search: str | None = None,
        low_stock_only: bool = False,
    ) -> int:
        where, params = self._item_filters(category_id, search, low_stock_only)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM inventory_items i {where}", params
            )
            (count,) = await cursor.fetchone()
            return count

    async def delete_items(self, item_ids: list[int]) -> int:
        """Delete items; their transactions go with them (ON DELETE CASCADE)."""
        if not item_ids:
            return 0
        placeholders = ", ".join("?" for _ in item_ids)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"DELETE FROM inventory_items WHERE id IN ({placeholders})",
                list(item_ids),
            )
            deleted = cursor.rowcount
        logger.info("inventory_items_deleted", requested=len(item_ids), deleted=deleted)
        return deleted

    async def record_adjustment(
        self, transaction: StockTransaction
    ) -> tuple[StockTransaction, InventoryItem]:
        """
        Apply the signed change under a non-negative guard and log it.

        The write lock is taken before the item row is read, so the cost
        basis is always computed from the stock it is applied to.
        """
        item_id = transaction.item_id
        change = transaction.quantity_change

        async with get_transaction() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            cursor = await conn.execute(
                """
                SELECT stock_quantity, average_purchase_price, last_purchase_price
                FROM inventory_items WHERE id = ?
                """,
                (item_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                raise ItemNotFoundError(item_id)

            average, last = self._cost_basis(row, transaction)
            transaction = transaction.model_copy(update={"created_at": datetime.utcnow()})
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    stock_quantity = stock_quantity + ?,
                    average_purchase_price = ?,
                    last_purchase_price = ?,
                    updated_at = ?
                WHERE id = ? AND stock_quantity + ? >= 0
                """,
                (
                    change,
                    average,
                    last,
                    datetime.utcnow().isoformat(),
                    item_id,
                    change,
                ),
            )
            if cursor.rowcount == 0:
                logger.warning(
                    "stock_guard_rejected",
                    item_id=item_id,
                    quantity_change=change,
                    available=row["stock_quantity"],
                )
                raise InsufficientStockError(
                    item_id, requested=abs(change), available=row["stock_quantity"]
                )

            saved = await self._insert_transaction(conn, transaction)

        logger.info(
            "stock_adjusted",
            item_id=item_id,
            transaction_id=saved.id,
            type=saved.transaction_type.value,
            quantity_change=change,
        )
        item = await self.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return saved, item

    @staticmethod
    def _cost_basis(
        row: aiosqlite.Row, transaction: StockTransaction
    ) -> tuple[float | None, float | None]:
        """Average and last purchase price once ``transaction`` is applied."""
        average = row["average_purchase_price"]
        last = row["last_purchase_price"]
        unit_cost = transaction.unit_price
        if transaction.transaction_type in COST_BASIS_TYPES and unit_cost is not None:
            average = recalculate_average_cost(
                row["stock_quantity"], average, transaction.quantity_change, unit_cost
            )
            last = unit_cost
        return average, last

    async def _insert_transaction(
        self, conn: aiosqlite.Connection, transaction: StockTransaction
    ) -> StockTransaction:
        cursor = await conn.execute(
            """
            INSERT INTO stock_transactions (
                item_id, transaction_type, quantity_change, unit_price,
                total_price, reference_number, reason, transaction_date,
                actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction.item_id,
                transaction.transaction_type.value,
                transaction.quantity_change,
                transaction.unit_price,
                transaction.total_price,
                transaction.reference_number,
                transaction.reason,
                transaction.transaction_date.isoformat(),
                transaction.actor,
                transaction.created_at.isoformat(),
            ),
        )
        return transaction.model_copy(update={"id": cursor.lastrowid})

    @staticmethod
    def _transaction_filters(
        item_id: int,
        transaction_types: list[TransactionType] | None,
        date_from: datetime | None,
        date_to: datetime | None,
    ) -> tuple[str, list]:
        clauses = ["item_id = ?"]
        params: list = [item_id]
        if transaction_types:
            clauses.append(
                f"transaction_type IN ({', '.join('?' for _ in transaction_types)})"
            )
            params.extend(TransactionType(t).value for t in transaction_types)
        if date_from is not None:
            clauses.append("transaction_date >= ?")
            params.append(date_from.isoformat())
        if date_to is not None:
            clauses.append("transaction_date <= ?")
            params.append(date_to.isoformat())
        return "WHERE " + " AND ".join(clauses), params

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
        where, params = self._transaction_filters(
            item_id, transaction_types, date_from, date_to
        )
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_transactions {where}
                ORDER BY transaction_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def count_transactions(
        self,
        item_id: int,
        transaction_types: list[TransactionType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> int:
        where, params = self._transaction_filters(
            item_id, transaction_types, date_from, date_to
        )
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM stock_transactions {where}", params
            )
            (count,) = await cursor.fetchone()
            return count

    async def get_recent_purchase_prices(
        self, item_id: int, limit: int = 2
    ) -> list[float]:
        """
        Unit prices of the latest purchases (incl. opening stock), newest first.

        Ordered by when they were recorded, not by their business date, so the
        first price is the one held in ``last_purchase_price``.
        """
        types = sorted(t.value for t in COST_BASIS_TYPES)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT unit_price FROM stock_transactions
                WHERE item_id = ?
                  AND unit_price IS NOT NULL
                  AND transaction_type IN ({', '.join('?' for _ in types)})
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (item_id, *types, limit),
            )
            rows = await cursor.fetchall()
            return [float(row["unit_price"]) for row in rows]

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a joined database row to an InventoryItem entity."""
        now = datetime.utcnow()
        return InventoryItem(
            id=row["id"],
            name=row["name"],
            unit=row["unit"],
            description=row["description"],
            category_id=row["category_id"],
            category_name=row["category_name"],
            stock_quantity=row["stock_quantity"],
            reorder_point=row["reorder_point"],
            selling_price=row["selling_price"],
            average_purchase_price=row["average_purchase_price"],
            last_purchase_price=row["last_purchase_price"],
            created_at=parse_timestamp(row["created_at"]) or now,
            updated_at=parse_timestamp(row["updated_at"]) or now,
        )

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> StockTransaction:
        """Convert a database row to a StockTransaction entity."""
        now = datetime.utcnow()
        return StockTransaction(
            id=row["id"],
            item_id=row["item_id"],
            transaction_type=TransactionType(row["transaction_type"]),
            quantity_change=row["quantity_change"],
            unit_price=row["unit_price"],
            total_price=row["total_price"],
            reference_number=row["reference_number"],
            reason=row["reason"],
            transaction_date=parse_timestamp(row["transaction_date"]) or now,
            actor=row["actor"],
            created_at=parse_timestamp(row["created_at"]) or now,
        )
