"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from stockledger.config import reset_settings
from stockledger.core.entities.inventory import InventoryRecord
from stockledger.core.services import StockLedger


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env changes in one test don't leak into another."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def ledger_db(temp_db_path: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary database with the global pool pointed at it."""
    import stockledger.infrastructure.storage.sqlite.connection as conn_module
    from stockledger.infrastructure.storage.sqlite.migrations import initialize_database

    conn_module._pool = None
    await initialize_database(db_path=temp_db_path)

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await conn_module.close_pool()


@pytest.fixture
def ledger() -> StockLedger:
    return StockLedger()


@pytest.fixture
def sample_record() -> InventoryRecord:
    """Stored record with 100 units on hand at an average cost of 5.0."""
    return InventoryRecord(
        id=1,
        product_id="PROD-001",
        sku="SKU-001",
        current_stock=100,
        reserved_stock=0,
        available_stock=100,
        reorder_level=10,
        max_stock=1000,
        cost_price=4.5,
        average_cost=5.0,
        version=1,
    )
