"""SQLite implementation of the append-only stock transaction log."""

from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import StockTransaction, TransactionType
from stockledger.core.interfaces.transaction_log import ITransactionLog
from stockledger.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)


def to_db_timestamp(value: datetime) -> str:
    """Normalize to a fixed-width UTC ISO string so text comparison orders correctly."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


async def append_transactions(
    conn: aiosqlite.Connection,
    inventory_record_id: int,
    transactions: list[StockTransaction],
) -> list[StockTransaction]:
    """
    Insert ledger entries on an open transaction.

    The caller owns the transaction so the entries commit together with the
    record update. Returns copies of the entries carrying their new IDs.
    """
    appended: list[StockTransaction] = []
    for txn in transactions:
        cursor = await conn.execute(
            """
            INSERT INTO stock_transactions (
                inventory_record_id, transaction_type, quantity, performed_by,
                reason, reference, notes, cost, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                inventory_record_id,
                txn.transaction_type.value,
                txn.quantity,
                txn.performed_by,
                txn.reason,
                txn.reference,
                txn.notes,
                txn.cost,
                to_db_timestamp(txn.created_at),
            ),
        )
        appended.append(
            txn.model_copy(
                update={"id": cursor.lastrowid, "inventory_record_id": inventory_record_id}
            )
        )
        logger.info(
            "stock_transaction_recorded",
            transaction_id=cursor.lastrowid,
            record_id=inventory_record_id,
            type=txn.transaction_type.value,
            qty=txn.quantity,
        )
    return appended


class SQLiteTransactionLog(ITransactionLog):
    """Read access to the stock_transactions table."""

    async def list_transactions(
        self,
        inventory_record_id: int,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockTransaction]:
        """Get transactions for a record in ledger order (oldest first)."""
        query = "SELECT * FROM stock_transactions WHERE inventory_record_id = ?"
        params: list = [inventory_record_id]

        if since is not None:
            query += " AND created_at >= ?"
            params.append(to_db_timestamp(since))
        if until is not None:
            query += " AND created_at < ?"
            params.append(to_db_timestamp(until))

        query += " ORDER BY created_at ASC, id ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_transaction(row) for row in rows]

    async def count_transactions(self, inventory_record_id: int) -> int:
        """Count all transactions recorded for a record."""
        async with get_connection() as conn:
            async with conn.execute(
                "SELECT COUNT(*) FROM stock_transactions WHERE inventory_record_id = ?",
                (inventory_record_id,),
            ) as cursor:
                row = await cursor.fetchone()
        return row[0]

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> StockTransaction:
        """Convert a database row to a StockTransaction entity."""
        return StockTransaction(
            id=row["id"],
            inventory_record_id=row["inventory_record_id"],
            transaction_type=TransactionType(row["transaction_type"]),
            quantity=row["quantity"],
            performed_by=row["performed_by"],
            reason=row["reason"],
            reference=row["reference"],
            notes=row["notes"],
            cost=row["cost"],
            created_at=from_db_timestamp(row["created_at"]),
        )
