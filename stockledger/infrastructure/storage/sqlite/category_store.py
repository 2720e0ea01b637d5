"""SQLite implementation of category storage."""

from datetime import datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.category import Category
from stockledger.core.exceptions import CategoryNotFoundError, DuplicateCategoryError
from stockledger.core.interfaces.inventory_store import ICategoryStore
from stockledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import parse_timestamp

logger = get_logger(__name__)


class SQLiteCategoryStore(ICategoryStore):
    """Categories table. Names are unique regardless of case."""

    async def create_category(self, category: Category) -> Category:
        now = datetime.utcnow()
        category.created_at = now
        category.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO categories (name, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        category.name,
                        category.description,
                        category.created_at.isoformat(),
                        category.updated_at.isoformat(),
                    ),
                )
                category.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise DuplicateCategoryError(category.name) from e

        logger.info("category_created", category_id=category.id, name=category.name)
        return category

    async def get_category(self, category_id: int) -> Category | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def get_category_by_name(self, name: str) -> Category | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE name = ? COLLATE NOCASE",
                (name.strip(),),
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def list_categories(self) -> list[Category]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories ORDER BY name COLLATE NOCASE"
            )
            rows = await cursor.fetchall()
            return [self._row_to_category(row) for row in rows]

    async def update_category(self, category: Category) -> Category:
        category.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE categories SET name = ?, description = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        category.name,
                        category.description,
                        category.updated_at.isoformat(),
                        category.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise CategoryNotFoundError(category.id)
        except aiosqlite.IntegrityError as e:
            raise DuplicateCategoryError(category.name, category.id) from e

        logger.info("category_updated", category_id=category.id)
        return category

    async def delete_category(self, category_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM categories WHERE id = ?", (category_id,)
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("category_deleted", category_id=category_id)
        return deleted

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        now = datetime.utcnow()
        return Category(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=parse_timestamp(row["created_at"]) or now,
            updated_at=parse_timestamp(row["updated_at"]) or now,
        )
