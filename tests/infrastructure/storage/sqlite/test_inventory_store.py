"""Integration tests for SQLiteInventoryStore against a migrated database."""

from datetime import date

import aiosqlite
import pytest

from stockledger.core.entities.inventory import (
    AlertType,
    InventoryRecord,
    InventoryStatus,
    StockAlert,
    StockTransaction,
    TransactionType,
    utcnow,
)
from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    DuplicateInventoryRecordError,
)


def make_record(n: int, current_stock: int = 50, reorder_level: int = 10) -> InventoryRecord:
    return InventoryRecord(
        product_id=f"PROD-{n:03d}",
        sku=f"SKU-{n:03d}",
        current_stock=current_stock,
        available_stock=current_stock,
        reorder_level=reorder_level,
    )


class TestCreateRecord:
    async def test_round_trip(self, store, new_record, opening_transaction):
        new_record.expiry_date = date(2030, 6, 30)

        created, appended = await store.create_record(new_record, [opening_transaction])
        loaded = await store.get_record(created.id)

        assert created.id is not None
        assert created.version == 1
        assert loaded.product_id == "PROD-100"
        assert loaded.sku == "SKU-100"
        assert loaded.current_stock == 40
        assert loaded.reserved_stock == 5
        assert loaded.available_stock == 35
        assert loaded.location.warehouse == "WH-1"
        assert loaded.location.bin == "14"
        assert loaded.supplier_id == "SUP-1"
        assert loaded.cost_price == 3.5
        assert loaded.average_cost == 3.75
        assert loaded.last_purchase_price == 4.0
        assert loaded.expiry_date == date(2030, 6, 30)
        assert loaded.batch_number == "B-2025-01"
        assert loaded.serial_numbers == ["SN-1", "SN-2"]
        assert loaded.is_perishable is True
        assert loaded.is_tracked is False
        assert loaded.status == InventoryStatus.ACTIVE
        assert loaded.version == 1

        assert len(appended) == 1
        assert appended[0].id is not None
        assert appended[0].inventory_record_id == created.id

    async def test_opening_transaction_logged(
        self, store, transaction_log, new_record, opening_transaction
    ):
        created, _ = await store.create_record(new_record, [opening_transaction])

        entries = await transaction_log.list_transactions(created.id)

        assert len(entries) == 1
        assert entries[0].transaction_type == TransactionType.ADJUSTMENT
        assert entries[0].quantity == 40
        assert entries[0].cost == 3.75
        assert entries[0].created_at == opening_transaction.created_at

    async def test_initial_alerts_saved(self, store):
        record = make_record(1, current_stock=0)
        record.alerts.append(
            StockAlert(alert_type=AlertType.OUT_OF_STOCK, message="Out of stock")
        )

        created, _ = await store.create_record(record)
        loaded = await store.get_record(created.id)

        assert created.alerts[0].id is not None
        assert len(loaded.alerts) == 1
        assert loaded.alerts[0].inventory_record_id == created.id
        assert loaded.has_active_alert(AlertType.OUT_OF_STOCK)

    async def test_duplicate_product(self, store):
        await store.create_record(make_record(1))
        duplicate = make_record(2)
        duplicate.product_id = "PROD-001"

        with pytest.raises(DuplicateInventoryRecordError):
            await store.create_record(duplicate)

    async def test_duplicate_sku(self, store):
        await store.create_record(make_record(1))
        duplicate = make_record(2)
        duplicate.sku = "SKU-001"

        with pytest.raises(DuplicateInventoryRecordError):
            await store.create_record(duplicate)

        assert await store.get_record_by_product("PROD-002") is None


class TestGetRecord:
    async def test_lookups(self, store):
        created, _ = await store.create_record(make_record(7))

        by_product = await store.get_record_by_product("PROD-007")
        by_sku = await store.get_record_by_sku("SKU-007")

        assert by_product.id == created.id
        assert by_sku.id == created.id

    async def test_missing(self, store):
        assert await store.get_record(999) is None
        assert await store.get_record_by_product("nope") is None
        assert await store.get_record_by_sku("nope") is None


class TestCommitMutation:
    async def test_bumps_version_and_persists(self, store, transaction_log):
        created, _ = await store.create_record(make_record(1))
        record = await store.get_record(created.id)

        record.current_stock = 30
        record.available_stock = 30
        record.last_sale_date = utcnow()
        sale = StockTransaction(
            transaction_type=TransactionType.SALE, quantity=-20, performed_by="alice"
        )

        committed, appended = await store.commit_mutation(record, 1, [sale])
        loaded = await store.get_record(created.id)

        assert committed.version == 2
        assert loaded.version == 2
        assert loaded.current_stock == 30
        assert loaded.last_sale_date == record.last_sale_date
        assert appended[0].quantity == -20
        assert await transaction_log.count_transactions(created.id) == 1

    async def test_inserts_and_resolves_alerts(self, store):
        created, _ = await store.create_record(make_record(1, current_stock=5))

        record = await store.get_record(created.id)
        record.alerts.append(StockAlert(alert_type=AlertType.LOW_STOCK, message="Low stock"))
        await store.commit_mutation(record, record.version, [])

        record = await store.get_record(created.id)
        assert record.has_active_alert(AlertType.LOW_STOCK)

        record.alerts[0].is_active = False
        record.alerts[0].resolved_at = utcnow()
        await store.commit_mutation(record, record.version, [])

        loaded = await store.get_record(created.id)
        assert len(loaded.alerts) == 1
        assert loaded.alerts[0].is_active is False
        assert loaded.alerts[0].resolved_at is not None
        assert loaded.active_alerts == []

    async def test_stale_version_writes_nothing(self, store, transaction_log):
        created, _ = await store.create_record(make_record(1))

        first = await store.get_record(created.id)
        second = await store.get_record(created.id)

        first.current_stock = 45
        first.available_stock = 45
        await store.commit_mutation(first, 1, [])

        second.current_stock = 10
        second.available_stock = 10
        second.alerts.append(StockAlert(alert_type=AlertType.LOW_STOCK, message="Low"))
        txn = StockTransaction(
            transaction_type=TransactionType.SALE, quantity=-40, performed_by="bob"
        )

        with pytest.raises(ConcurrencyConflictError):
            await store.commit_mutation(second, 1, [txn])

        loaded = await store.get_record(created.id)
        assert loaded.current_stock == 45
        assert loaded.version == 2
        assert loaded.alerts == []
        assert await transaction_log.count_transactions(created.id) == 0


class TestListing:
    async def test_list_records_paginates_by_id(self, store):
        for n in range(1, 6):
            await store.create_record(make_record(n))

        first_page = await store.list_records(limit=2, offset=0)
        last_page = await store.list_records(limit=2, offset=4)

        assert [r.product_id for r in first_page] == ["PROD-001", "PROD-002"]
        assert [r.product_id for r in last_page] == ["PROD-005"]

    async def test_list_low_stock_orders_by_stock(self, store):
        await store.create_record(make_record(1, current_stock=8))
        await store.create_record(make_record(2, current_stock=50))
        await store.create_record(make_record(3, current_stock=0))
        await store.create_record(make_record(4, current_stock=10))

        low = await store.list_low_stock()

        assert [r.product_id for r in low] == ["PROD-003", "PROD-001", "PROD-004"]


class TestSchemaConstraints:
    async def test_negative_stock_rejected(self, store, ledger_db):
        created, _ = await store.create_record(make_record(1))

        async with aiosqlite.connect(ledger_db) as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute(
                    "UPDATE inventory_records SET current_stock = -1 WHERE id = ?",
                    (created.id,),
                )
