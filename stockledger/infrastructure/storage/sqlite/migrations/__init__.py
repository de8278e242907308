"""Database migrations module."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    APPEND_ONLY_TRIGGERS,
    REQUIRED_TABLES,
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "APPEND_ONLY_TRIGGERS",
    "REQUIRED_TABLES",
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "run_migrations",
    "verify_schema_integrity",
]
