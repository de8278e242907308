"""Core domain entities."""

from stockledger.core.entities.inventory import (
    AlertType,
    InventoryRecord,
    InventoryStatus,
    StockAlert,
    StockLocation,
    StockTransaction,
    TransactionType,
)

__all__ = [
    "InventoryRecord",
    "InventoryStatus",
    "StockAlert",
    "AlertType",
    "StockLocation",
    "StockTransaction",
    "TransactionType",
]
