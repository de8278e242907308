"""SQLite implementation of inventory record storage."""

import json
from datetime import date

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import (
    AlertType,
    InventoryRecord,
    InventoryStatus,
    StockAlert,
    StockLocation,
    StockTransaction,
    utcnow,
)
from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    DuplicateInventoryRecordError,
)
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.transaction_log import (
    append_transactions,
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory record and alert storage."""

    async def create_record(
        self,
        record: InventoryRecord,
        transactions: list[StockTransaction] | None = None,
    ) -> tuple[InventoryRecord, list[StockTransaction]]:
        """Insert a new record with its alerts and opening transactions."""
        now = utcnow()
        record.created_at = now
        record.updated_at = now
        record.version = 1

        async with get_transaction(immediate=True) as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO inventory_records (
                        product_id, sku, current_stock, reserved_stock, available_stock,
                        reorder_level, max_stock, location, supplier_id, cost_price,
                        average_cost, last_purchase_price, last_purchase_date,
                        last_sale_date, expiry_date, batch_number, serial_numbers,
                        is_perishable, is_tracked, status, version, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.product_id,
                        record.sku,
                        *self._mutable_columns(record),
                        record.version,
                        to_db_timestamp(record.created_at),
                        to_db_timestamp(record.updated_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                if "UNIQUE" in str(e):
                    raise DuplicateInventoryRecordError(record.product_id, record.sku) from e
                raise

            record.id = cursor.lastrowid
            await self._save_alerts(conn, record)
            appended = await append_transactions(conn, record.id, transactions or [])

        logger.info(
            "inventory_record_created",
            record_id=record.id,
            product_id=record.product_id,
            sku=record.sku,
            current_stock=record.current_stock,
        )
        return record, appended

    async def get_record(self, record_id: int) -> InventoryRecord | None:
        """Get inventory record by ID."""
        records = await self._fetch_records(
            "SELECT * FROM inventory_records WHERE id = ?", (record_id,)
        )
        return records[0] if records else None

    async def get_record_by_product(self, product_id: str) -> InventoryRecord | None:
        """Get inventory record by product ID."""
        records = await self._fetch_records(
            "SELECT * FROM inventory_records WHERE product_id = ?", (product_id,)
        )
        return records[0] if records else None

    async def get_record_by_sku(self, sku: str) -> InventoryRecord | None:
        """Get inventory record by SKU."""
        records = await self._fetch_records(
            "SELECT * FROM inventory_records WHERE sku = ?", (sku,)
        )
        return records[0] if records else None

    async def commit_mutation(
        self,
        record: InventoryRecord,
        expected_version: int,
        transactions: list[StockTransaction],
    ) -> tuple[InventoryRecord, list[StockTransaction]]:
        """Persist a mutated record if nobody else committed since it was read."""
        now = utcnow()

        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_records SET
                    current_stock = ?,
                    reserved_stock = ?,
                    available_stock = ?,
                    reorder_level = ?,
                    max_stock = ?,
                    location = ?,
                    supplier_id = ?,
                    cost_price = ?,
                    average_cost = ?,
                    last_purchase_price = ?,
                    last_purchase_date = ?,
                    last_sale_date = ?,
                    expiry_date = ?,
                    batch_number = ?,
                    serial_numbers = ?,
                    is_perishable = ?,
                    is_tracked = ?,
                    status = ?,
                    version = version + 1,
                    updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    *self._mutable_columns(record),
                    to_db_timestamp(now),
                    record.id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                raise ConcurrencyConflictError(record.id, expected_version)  # type: ignore[arg-type]

            await self._save_alerts(conn, record)
            appended = await append_transactions(conn, record.id, transactions)  # type: ignore[arg-type]

        record.version = expected_version + 1
        record.updated_at = now
        logger.info(
            "inventory_record_committed",
            record_id=record.id,
            version=record.version,
            current_stock=record.current_stock,
            reserved_stock=record.reserved_stock,
            transactions=len(appended),
        )
        return record, appended

    async def list_records(
        self, limit: int = 100, offset: int = 0
    ) -> list[InventoryRecord]:
        """List inventory records with pagination."""
        return await self._fetch_records(
            "SELECT * FROM inventory_records ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
        )

    async def list_low_stock(
        self, limit: int = 100, offset: int = 0
    ) -> list[InventoryRecord]:
        """List records at or below their reorder level, lowest stock first."""
        return await self._fetch_records(
            """
            SELECT * FROM inventory_records
            WHERE current_stock <= reorder_level
            ORDER BY current_stock ASC, id ASC
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    async def _fetch_records(self, query: str, params: tuple) -> list[InventoryRecord]:
        async with get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                rows = await cursor.fetchall()
            if not rows:
                return []

            ids = [row["id"] for row in rows]
            placeholders = ", ".join("?" for _ in ids)
            async with conn.execute(
                f"""
                SELECT * FROM inventory_alerts
                WHERE inventory_record_id IN ({placeholders})
                ORDER BY id
                """,
                ids,
            ) as cursor:
                alert_rows = await cursor.fetchall()

        alerts: dict[int, list[StockAlert]] = {record_id: [] for record_id in ids}
        for alert_row in alert_rows:
            alerts[alert_row["inventory_record_id"]].append(self._row_to_alert(alert_row))

        return [self._row_to_record(row, alerts[row["id"]]) for row in rows]

    async def _save_alerts(self, conn: aiosqlite.Connection, record: InventoryRecord) -> None:
        """Insert new alerts and write back activity flags of existing ones."""
        for alert in record.alerts:
            if alert.id is None:
                cursor = await conn.execute(
                    """
                    INSERT INTO inventory_alerts (
                        inventory_record_id, alert_type, message, is_active,
                        created_at, resolved_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        alert.alert_type.value,
                        alert.message,
                        int(alert.is_active),
                        to_db_timestamp(alert.created_at),
                        to_db_timestamp(alert.resolved_at) if alert.resolved_at else None,
                    ),
                )
                alert.id = cursor.lastrowid
                alert.inventory_record_id = record.id
            elif not alert.is_active:
                await conn.execute(
                    """
                    UPDATE inventory_alerts SET is_active = 0, resolved_at = ?
                    WHERE id = ? AND inventory_record_id = ? AND is_active = 1
                    """,
                    (
                        to_db_timestamp(alert.resolved_at or utcnow()),
                        alert.id,
                        record.id,
                    ),
                )

    @staticmethod
    def _mutable_columns(record: InventoryRecord) -> tuple:
        """Column values shared by INSERT and UPDATE, in statement order."""
        return (
            record.current_stock,
            record.reserved_stock,
            record.available_stock,
            record.reorder_level,
            record.max_stock,
            record.location.model_dump_json() if record.location else None,
            record.supplier_id,
            record.cost_price,
            record.average_cost,
            record.last_purchase_price,
            to_db_timestamp(record.last_purchase_date) if record.last_purchase_date else None,
            to_db_timestamp(record.last_sale_date) if record.last_sale_date else None,
            record.expiry_date.isoformat() if record.expiry_date else None,
            record.batch_number,
            json.dumps(record.serial_numbers),
            int(record.is_perishable),
            int(record.is_tracked),
            record.status.value,
        )

    @staticmethod
    def _row_to_record(row: aiosqlite.Row, alerts: list[StockAlert]) -> InventoryRecord:
        """Convert a database row to an InventoryRecord entity."""
        expiry_date = None
        if row["expiry_date"]:
            try:
                expiry_date = date.fromisoformat(row["expiry_date"])
            except (ValueError, TypeError):
                logger.warning("invalid_expiry_date", record_id=row["id"])

        return InventoryRecord(
            id=row["id"],
            product_id=row["product_id"],
            sku=row["sku"],
            current_stock=row["current_stock"],
            reserved_stock=row["reserved_stock"],
            available_stock=row["available_stock"],
            reorder_level=row["reorder_level"],
            max_stock=row["max_stock"],
            location=(
                StockLocation.model_validate_json(row["location"]) if row["location"] else None
            ),
            supplier_id=row["supplier_id"],
            cost_price=float(row["cost_price"]),
            average_cost=float(row["average_cost"]),
            last_purchase_price=row["last_purchase_price"],
            last_purchase_date=from_db_timestamp(row["last_purchase_date"]),
            last_sale_date=from_db_timestamp(row["last_sale_date"]),
            expiry_date=expiry_date,
            batch_number=row["batch_number"],
            serial_numbers=json.loads(row["serial_numbers"] or "[]"),
            is_perishable=bool(row["is_perishable"]),
            is_tracked=bool(row["is_tracked"]),
            status=InventoryStatus(row["status"]),
            alerts=alerts,
            version=row["version"],
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )

    @staticmethod
    def _row_to_alert(row: aiosqlite.Row) -> StockAlert:
        """Convert a database row to a StockAlert entity."""
        return StockAlert(
            id=row["id"],
            inventory_record_id=row["inventory_record_id"],
            alert_type=AlertType(row["alert_type"]),
            message=row["message"],
            is_active=bool(row["is_active"]),
            created_at=from_db_timestamp(row["created_at"]),
            resolved_at=from_db_timestamp(row["resolved_at"]),
        )
