"""Pytest fixtures for SQLite storage tests."""

import pytest

from stockledger.core.entities.inventory import (
    InventoryRecord,
    StockLocation,
    StockTransaction,
    TransactionType,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockledger.infrastructure.storage.sqlite.transaction_log import SQLiteTransactionLog


@pytest.fixture
def store(ledger_db) -> SQLiteInventoryStore:
    return SQLiteInventoryStore()


@pytest.fixture
def transaction_log(ledger_db) -> SQLiteTransactionLog:
    return SQLiteTransactionLog()


@pytest.fixture
def new_record() -> InventoryRecord:
    """Unsaved record with every optional column populated."""
    return InventoryRecord(
        product_id="PROD-100",
        sku="SKU-100",
        current_stock=40,
        reserved_stock=5,
        available_stock=35,
        reorder_level=10,
        max_stock=500,
        location=StockLocation(warehouse="WH-1", zone="A", aisle="3", shelf="2", bin="14"),
        supplier_id="SUP-1",
        cost_price=3.5,
        average_cost=3.75,
        last_purchase_price=4.0,
        batch_number="B-2025-01",
        serial_numbers=["SN-1", "SN-2"],
        is_perishable=True,
        is_tracked=False,
    )


@pytest.fixture
def opening_transaction() -> StockTransaction:
    return StockTransaction(
        transaction_type=TransactionType.ADJUSTMENT,
        quantity=40,
        performed_by="admin",
        reason="Opening balance",
        cost=3.75,
    )
