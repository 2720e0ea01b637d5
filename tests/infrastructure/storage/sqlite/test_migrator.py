"""Tests for the schema migrator."""

from pathlib import Path

import aiosqlite

from stockledger.infrastructure.storage.sqlite.migrations import (
    MigrationInfo,
    discover_migrations,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)
from stockledger.infrastructure.storage.sqlite.migrations.migrator import apply_migration


def test_discover_migrations():
    migrations = discover_migrations()
    assert migrations[0].version == "001"
    assert migrations[0].name == "initial_schema"
    assert len(migrations[0].checksum) == 16


def test_discover_skips_badly_named_files(tmp_path: Path):
    (tmp_path / "v002_extra.sql").write_text("SELECT 1;")
    (tmp_path / "vX_broken.sql").write_text("SELECT 1;")
    (tmp_path / "v003_Bad'Name.sql").write_text("SELECT 1;")
    assert [m.version for m in discover_migrations(tmp_path)] == ["002"]


async def test_initialize_fresh_database(tmp_path: Path):
    db_path = tmp_path / "data" / "inventory.db"

    results = await initialize_database(db_path)

    assert [r.version for r in results] == ["001"]
    assert results[0].success, results[0].error
    assert results[0].error is None
    assert await verify_schema_integrity(db_path) == {
        "integrity": [],
        "foreign_keys": [],
        "missing_tables": [],
    }


async def test_fresh_database_is_wal_and_versioned(tmp_path: Path):
    db_path = tmp_path / "inventory.db"
    await initialize_database(db_path)

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA journal_mode")
        (mode,) = await cursor.fetchone()
        cursor = await conn.execute("SELECT version FROM schema_migrations")
        versions = [row[0] for row in await cursor.fetchall()]

    assert mode == "wal"
    assert versions == ["001"]


async def test_rerun_applies_nothing(tmp_path: Path):
    db_path = tmp_path / "inventory.db"
    await initialize_database(db_path)
    assert await initialize_database(db_path) == []


async def test_failed_migration_rolls_back(tmp_path: Path):
    db_path = tmp_path / "inventory.db"
    await initialize_database(db_path)
    broken = tmp_path / "v002_broken.sql"
    broken.write_text("CREATE TABLE half_done (id INTEGER);\nINSERT INTO nowhere VALUES (1);\n")

    async with aiosqlite.connect(db_path) as conn:
        result = await apply_migration(conn, MigrationInfo.from_file(broken))
        cursor = await conn.execute(
            "SELECT COUNT(*) FROM sqlite_master WHERE name = 'half_done'"
        )
        (leftover,) = await cursor.fetchone()

    assert result.success is False
    assert "nowhere" in result.error
    assert leftover == 0
    assert (await get_migration_status(db_path))["applied_migrations"] == ["001"]


async def test_migration_status(tmp_path: Path):
    db_path = tmp_path / "inventory.db"
    before = await get_migration_status(db_path)
    assert before["exists"] is False
    assert before["pending_migrations"] == ["001"]

    await initialize_database(db_path)

    after = await get_migration_status(db_path)
    assert after["current_version"] == "001"
    assert after["pending_migrations"] == []
