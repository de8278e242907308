"""Update Inventory Settings Use Case — thresholds, cost price, location, status."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import UpdateInventorySettingsRequest
from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.config import get_logger
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class UpdateInventorySettingsResult:
    """Result of updating inventory settings."""

    record: InventoryRecord
    changed_fields: list[str] = field(default_factory=list)


class UpdateInventorySettingsUseCase:
    """Apply administrative changes to an inventory record."""

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
        self, request: UpdateInventorySettingsRequest
    ) -> UpdateInventorySettingsResult:
        """Execute update inventory settings use case."""
        changes = request.changes()
        logger.info(
            "update_inventory_settings_started",
            record_id=request.record_id,
            fields=sorted(changes),
        )

        store = await self._get_inventory_store()

        def mutate(record: InventoryRecord) -> list[StockTransaction] | None:
            if not changes:
                return None
            self._ledger.update_settings(record, changes)
            return []

        record, _ = await apply_stock_mutation(store, request.record_id, mutate)

        logger.info(
            "update_inventory_settings_complete",
            record_id=record.id,
            status=record.status.value,
            version=record.version,
        )

        return UpdateInventorySettingsResult(record=record, changed_fields=sorted(changes))
