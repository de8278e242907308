"""Release Reserved Stock Use Case."""

from dataclasses import dataclass

from stockledger.application.dto.requests import ReleaseReservedStockRequest
from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.config import get_logger
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class ReleaseReservedStockResult:
    """Result of releasing reserved stock."""

    record: InventoryRecord


class ReleaseReservedStockUseCase:
    """Release reserved stock, clamping the reservation at zero."""

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
        self, request: ReleaseReservedStockRequest
    ) -> ReleaseReservedStockResult:
        """Execute release reserved stock use case."""
        logger.info(
            "release_reserved_stock_started",
            record_id=request.record_id,
            quantity=request.quantity,
            reference=request.reference,
        )

        store = await self._get_inventory_store()

        def mutate(record: InventoryRecord) -> list[StockTransaction]:
            self._ledger.release_reserved_stock(record, request.quantity)
            return []

        record, _ = await apply_stock_mutation(store, request.record_id, mutate)

        logger.info(
            "release_reserved_stock_complete",
            record_id=record.id,
            reserved_stock=record.reserved_stock,
            available_stock=record.available_stock,
        )

        return ReleaseReservedStockResult(record=record)
