"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockledger.infrastructure.storage.sqlite.transaction_log import SQLiteTransactionLog

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_transaction_log: SQLiteTransactionLog | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_transaction_log() -> SQLiteTransactionLog:
    """Get singleton transaction log instance."""
    global _transaction_log
    if _transaction_log is None:
        _transaction_log = SQLiteTransactionLog()
    return _transaction_log


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteTransactionLog",
    # Factory functions
    "get_inventory_store",
    "get_transaction_log",
]
