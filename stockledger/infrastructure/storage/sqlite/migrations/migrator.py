"""
Schema migrations and integrity checks for the ledger database.

Migrations are plain SQL files named vNNN_name.sql in this package. Each one
runs inside a single transaction together with its schema_migrations row,
so a failing file leaves the schema exactly as it was.

verify_schema_integrity() goes beyond SQLite's own checks and audits the
ledger itself: the append-only triggers must exist, available stock must
match on-hand minus reserved, and every record's on-hand stock must equal
the sum of its transaction log.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

MIGRATION_FILE_RE = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "inventory_records",
    "inventory_alerts",
    "stock_transactions",
    "schema_migrations",
]

APPEND_ONLY_TRIGGERS = [
    "stock_transactions_no_update",
    "stock_transactions_no_delete",
]


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILE_RE.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(migrations_dir: Path | None = None) -> list[MigrationInfo]:
    """Migration files in version order; badly named files are skipped."""
    migrations = []
    for path in sorted((migrations_dir or MIGRATIONS_DIR).glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        # fresh database
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


async def apply_migration(
    conn: aiosqlite.Connection, migration: MigrationInfo
) -> MigrationResult:
    """Run one migration file and record it, all or nothing."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()
    sql = migration.path.read_text(encoding="utf-8")

    try:
        # executescript leaves the explicit BEGIN open so the bookkeeping
        # row commits together with the schema change
        await conn.executescript(f"BEGIN;\n{sql}\n")
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.perf_counter() - start) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - start) * 1000),
            error=str(e),
        )

    elapsed = int((time.perf_counter() - start) * 1000)
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def initialize_database(
    db_path: Path | None = None,
    migrations_dir: Path | None = None,
) -> list[MigrationResult]:
    """
    Create the database if needed and apply every pending migration.

    Stops at the first failing migration; later files are not attempted.

    Returns:
        Results for the migrations attempted in this run (empty when the
        schema was already current)
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await get_applied_migrations(conn)
        for migration in discover_migrations(migrations_dir):
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


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path | None = None,
) -> dict:
    """Applied and pending migration versions."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations(migrations_dir)

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [],
            "total_migrations": len(discovered),
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": list(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


def _check(name: str, passed: bool, **details) -> dict:
    return {"check": name, "status": "PASS" if passed else "FAIL", **details}


async def verify_schema_integrity(
    db_path: Path | None = None,
    migrations_dir: Path | None = None,
) -> list[dict]:
    """
    Audit the database and the ledger stored in it.

    Returns one dict per check with "check", "status" (PASS/FAIL) and
    check-specific details.
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]
        checks.append(_check("integrity", integrity == "ok", result=integrity))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()
        checks.append(
            _check("foreign_keys", not fk_violations, violations=len(fk_violations))
        )

        cursor = await conn.execute(
            "SELECT type, name FROM sqlite_master WHERE type IN ('table', 'trigger')"
        )
        objects = await cursor.fetchall()
        tables = {name for kind, name in objects if kind == "table"}
        triggers = {name for kind, name in objects if kind == "trigger"}

        missing_tables = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append(_check("required_tables", not missing_tables, missing=missing_tables))

        missing_triggers = [t for t in APPEND_ONLY_TRIGGERS if t not in triggers]
        checks.append(
            _check("append_only_triggers", not missing_triggers, missing=missing_triggers)
        )

        applied = await get_applied_migrations(conn)
        changed = [
            m.version
            for m in discover_migrations(migrations_dir)
            if m.version in applied and applied[m.version] != m.checksum
        ]
        checks.append(_check("migration_checksums", not changed, changed=changed))

        if {"inventory_records", "stock_transactions"} <= tables:
            cursor = await conn.execute(
                """
                SELECT id FROM inventory_records
                WHERE available_stock != MAX(0, current_stock - reserved_stock)
                ORDER BY id
                """
            )
            drifted = [row[0] for row in await cursor.fetchall()]
            checks.append(
                _check(
                    "available_stock_consistency",
                    not drifted,
                    drifted_records=len(drifted),
                    record_ids=drifted,
                )
            )

            cursor = await conn.execute(
                """
                SELECT r.id FROM inventory_records r
                LEFT JOIN stock_transactions t ON t.inventory_record_id = r.id
                GROUP BY r.id
                HAVING r.current_stock != COALESCE(SUM(t.quantity), 0)
                ORDER BY r.id
                """
            )
            unbalanced = [row[0] for row in await cursor.fetchall()]
            checks.append(
                _check(
                    "ledger_balance",
                    not unbalanced,
                    unbalanced_records=len(unbalanced),
                    record_ids=unbalanced,
                )
            )

    return checks
