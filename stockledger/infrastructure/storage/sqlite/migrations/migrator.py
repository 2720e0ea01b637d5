"""
Versioned schema migrator for the inventory database.

Migration files live next to this module as ``vNNN_<name>.sql`` and run in
version order. Each file runs inside one transaction together with the row
that records it in ``schema_migrations``, so a failing migration leaves the
database at the previous version. An applied migration whose file was edited
afterwards is reported, never re-run.
"""

import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "categories",
    "inventory_items",
    "stock_transactions",
    "schema_migrations",
)

_FILENAME_RE = re.compile(r"v(\d{3})_([a-z0-9_]+)\.sql")


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME_RE.fullmatch(path.name)
        if match is None:
            raise ValueError(f"migration file must be named vNNN_name.sql, got {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match[1], name=match[2], path=path, checksum=checksum)

    def script(self) -> str:
        """The file's SQL plus its bookkeeping row, as one transaction."""
        body = self.path.read_text(encoding="utf-8")
        # version, name and checksum are regex/hex constrained: safe to inline
        return (
            "BEGIN;\n"
            f"{body}\n"
            "INSERT INTO schema_migrations (version, name, checksum) "
            f"VALUES ('{self.version}', '{self.name}', '{self.checksum}');\n"
            "COMMIT;\n"
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in version order. Badly named files are skipped."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return found


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> checksum. A fresh database has no bookkeeping table yet."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return dict(await cursor.fetchall())


async def apply_migration(
    conn: aiosqlite.Connection, migration: MigrationInfo
) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()
    error = None
    try:
        await conn.executescript(migration.script())
    except aiosqlite.Error as e:
        await conn.rollback()
        error = str(e)
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    if error is not None:
        logger.error("migration_failed", version=migration.version, error=error)
    else:
        await conn.execute(
            "UPDATE schema_migrations SET execution_time_ms = ? WHERE version = ?",
            (elapsed_ms, migration.version),
        )
        await conn.commit()
        logger.info(
            "migration_applied",
            version=migration.version,
            name=migration.name,
            execution_time_ms=elapsed_ms,
        )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=error is None,
        execution_time_ms=elapsed_ms,
        error=error,
    )


async def initialize_database(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Args:
        db_path: Database file (default from settings). Created if missing.

    Returns:
        One result per migration attempted, in order. Stops after the first
        failure; an up-to-date database returns an empty list.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        # a PRAGMA that returns a row stays open until closed and blocks COMMIT
        cursor = await conn.execute("PRAGMA journal_mode=WAL")
        await cursor.close()
        applied = await get_applied_migrations(conn)

        for migration in discover_migrations():
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    logger.warning("migration_checksum_changed", version=migration.version)
                continue
            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version plus applied and pending migrations."""
    db_path = db_path or get_settings().storage.db_path
    versions = [m.version for m in discover_migrations()]

    applied: dict[str, str] = {}
    if db_path.exists():
        async with aiosqlite.connect(db_path) as conn:
            applied = await get_applied_migrations(conn)

    return {
        "exists": db_path.exists(),
        "current_version": max(applied, default=None),
        "applied_migrations": sorted(applied),
        "pending_migrations": [v for v in versions if v not in applied],
    }


async def verify_schema_integrity(db_path: Path | None = None) -> dict[str, list[str]]:
    """
    Problems found in the database, keyed by check name.

    An empty list under every key means the database is healthy.
    """
    db_path = db_path or get_settings().storage.db_path
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = [row[0] for row in await cursor.fetchall() if row[0] != "ok"]

        cursor = await conn.execute("PRAGMA foreign_key_check")
        orphans = [f"{row[0]} rowid {row[1]} -> {row[2]}" for row in await cursor.fetchall()]

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}

    return {
        "integrity": integrity,
        "foreign_keys": orphans,
        "missing_tables": [t for t in REQUIRED_TABLES if t not in tables],
    }


def main() -> None:
    """``stockledger-migrate``: apply pending migrations, or report status."""
    import argparse

    parser = argparse.ArgumentParser(description="Apply stockledger schema migrations")
    parser.add_argument("--db-path", type=Path, help="database file (default from settings)")
    parser.add_argument("--status", action="store_true", help="show versions and exit")
    parser.add_argument("--verify", action="store_true", help="run integrity checks and exit")
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"current: {status['current_version'] or '-'}")
            print(f"pending: {', '.join(status['pending_migrations']) or '-'}")
            return 0

        if args.verify:
            problems = await verify_schema_integrity(args.db_path)
            for check, found in problems.items():
                print(f"{check}: {'ok' if not found else '; '.join(found)}")
            return 1 if any(problems.values()) else 0

        results = await initialize_database(args.db_path)
        for result in results:
            outcome = "applied" if result.success else f"FAILED ({result.error})"
            print(f"v{result.version} {result.name}: {outcome}")
        if not results:
            print("schema is up to date")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
