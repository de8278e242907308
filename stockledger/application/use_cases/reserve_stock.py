"""Reserve Stock Use Case — soft hold against a pending order."""

from dataclasses import dataclass

from stockledger.application.dto.requests import ReserveStockRequest
from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.config import get_logger
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class ReserveStockResult:
    """Result of reserving stock."""

    record: InventoryRecord


class ReserveStockUseCase:
    """Reserve available stock. No ledger entry is written."""

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

    async def execute(self, request: ReserveStockRequest) -> ReserveStockResult:
        """Execute reserve stock use case."""
        logger.info(
            "reserve_stock_started",
            record_id=request.record_id,
            quantity=request.quantity,
            reference=request.reference,
        )

        store = await self._get_inventory_store()

        def mutate(record: InventoryRecord) -> list[StockTransaction]:
            self._ledger.reserve_stock(record, request.quantity)
            return []

        record, _ = await apply_stock_mutation(store, request.record_id, mutate)

        logger.info(
            "reserve_stock_complete",
            record_id=record.id,
            reserved_stock=record.reserved_stock,
            available_stock=record.available_stock,
        )

        return ReserveStockResult(record=record)
