"""
Scan Stock Alerts Use Case.

Walks every inventory record in batches and raises or resolves the alerts
that are not produced inline by stock movements: out of stock, overstock,
expiry warning and expired.
"""

from dataclasses import dataclass, field
from datetime import date

from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.inventory import (
    InventoryRecord,
    StockAlert,
    StockTransaction,
)
from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    InventoryRecordNotFoundError,
)
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class ScanStockAlertsResult:
    """Result of an alert scan."""

    records_scanned: int = 0
    records_updated: int = 0
    alerts_raised: int = 0
    alerts_resolved: int = 0
    skipped_record_ids: list[int] = field(default_factory=list)


class ScanStockAlertsUseCase:
    """
    Periodic scanner for stock level and expiry alerts.

    Each record is updated through the same compare-and-swap cycle as stock
    movements. A record that keeps losing the race, or disappears while the
    scan runs, is skipped and reported; the next scan picks it up again.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: StockLedger | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger or get_stock_ledger()

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockledger.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(
        self,
        today: date | None = None,
        expiry_warning_days: int | None = None,
    ) -> ScanStockAlertsResult:
        """
        Scan all records and update their alerts.

        Args:
            today: Reference date for expiry checks (default: today)
            expiry_warning_days: Look-ahead window for expiry warnings
                (default LEDGER_EXPIRY_WARNING_DAYS)

        Returns:
            ScanStockAlertsResult with counts.
        """
        settings = get_settings().ledger
        today = today or date.today()
        if expiry_warning_days is None:
            expiry_warning_days = settings.expiry_warning_days

        store = await self._get_inventory_store()
        result = ScanStockAlertsResult()

        offset = 0
        while True:
            batch = await store.list_records(limit=settings.scan_batch_size, offset=offset)
            if not batch:
                break
            offset += len(batch)

            for candidate in batch:
                if candidate.id is None:
                    continue
                result.records_scanned += 1

                try:
                    changed = await self._scan_record(
                        store, candidate.id, today, expiry_warning_days
                    )
                except (ConcurrencyConflictError, InventoryRecordNotFoundError) as e:
                    logger.warning(
                        "alert_scan_record_skipped",
                        record_id=candidate.id,
                        error=e.code,
                    )
                    result.skipped_record_ids.append(candidate.id)
                    continue

                if changed:
                    result.records_updated += 1
                    result.alerts_raised += sum(1 for a in changed if a.is_active)
                    result.alerts_resolved += sum(1 for a in changed if not a.is_active)

            if len(batch) < settings.scan_batch_size:
                break

        logger.info(
            "alert_scan_complete",
            records_scanned=result.records_scanned,
            records_updated=result.records_updated,
            alerts_raised=result.alerts_raised,
            alerts_resolved=result.alerts_resolved,
            skipped=len(result.skipped_record_ids),
        )

        return result

    async def _scan_record(
        self,
        store: IInventoryStore,
        record_id: int,
        today: date,
        expiry_warning_days: int,
    ) -> list[StockAlert]:
        """Scan one record; returns the alerts raised or resolved on the committed attempt."""
        changed: list[StockAlert] = []

        def mutate(record: InventoryRecord) -> list[StockTransaction] | None:
            changed.clear()
            changed.extend(
                self._ledger.scan_alerts(
                    record,
                    today=today,
                    expiry_warning_days=expiry_warning_days,
                )
            )
            return [] if changed else None

        await apply_stock_mutation(store, record_id, mutate)
        return changed
