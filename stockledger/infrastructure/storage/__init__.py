"""Storage infrastructure implementations."""

from stockledger.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteTransactionLog,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInventoryStore",
    "SQLiteTransactionLog",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
