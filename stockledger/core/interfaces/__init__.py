"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.interfaces.transaction_log import ITransactionLog

__all__ = [
    "IInventoryStore",
    "ITransactionLog",
]
