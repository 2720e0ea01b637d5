"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path

import pytest

from stockledger.config import reset_settings
from stockledger.core.entities import InventoryItem
from stockledger.core.services.event_bus import reset_event_bus


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point storage at a per-test directory and start from fresh singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
    monkeypatch.delenv("INVENTORY_OVERSTOCK_MULTIPLIER", raising=False)
    reset_settings()
    reset_event_bus()
    yield
    reset_settings()
    reset_event_bus()


@pytest.fixture
async def sqlite_db(isolated_settings) -> AsyncGenerator[Path, None]:
    """Migrated database file with the global connection pool open on it."""
    from stockledger.config import get_settings
    from stockledger.infrastructure.storage.sqlite import close_pool, get_pool
    from stockledger.infrastructure.storage.sqlite.migrations import initialize_database

    db_path = get_settings().storage.db_path
    await initialize_database(db_path)
    await get_pool()
    yield db_path
    await close_pool()


@pytest.fixture
def sample_item() -> InventoryItem:
    """Item with stock, cost basis and a reorder point."""
    now = datetime(2024, 3, 1, 9, 0, 0)
    return InventoryItem(
        id=1,
        name="Arabica beans",
        unit="kg",
        description="Whole bean, medium roast",
        category_id=None,
        stock_quantity=40,
        reorder_point=10,
        selling_price=18.0,
        average_purchase_price=12.0,
        last_purchase_price=12.5,
        created_at=now,
        updated_at=now,
    )
