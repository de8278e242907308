"""Add Stock Use Case — positive stock movement with weighted average cost."""

from dataclasses import dataclass

from stockledger.application.dto.requests import AddStockRequest
from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.config import get_logger
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class AddStockResult:
    """Result of adding stock."""

    record: InventoryRecord
    transaction: StockTransaction


class AddStockUseCase:
    """Add stock (purchase, return, adjustment, transfer in)."""

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

    async def execute(self, request: AddStockRequest) -> AddStockResult:
        """Execute add stock use case."""
        logger.info(
            "add_stock_started",
            record_id=request.record_id,
            quantity=request.quantity,
            type=request.transaction_type.value,
        )

        store = await self._get_inventory_store()

        def mutate(record: InventoryRecord) -> list[StockTransaction]:
            return [
                self._ledger.add_stock(
                    record,
                    request.quantity,
                    performed_by=request.performed_by,
                    transaction_type=request.transaction_type,
                    reason=request.reason,
                    cost=request.cost,
                    reference=request.reference,
                    notes=request.notes,
                )
            ]

        record, transactions = await apply_stock_mutation(store, request.record_id, mutate)

        logger.info(
            "add_stock_complete",
            record_id=record.id,
            current_stock=record.current_stock,
            average_cost=round(record.average_cost, 4),
        )

        return AddStockResult(record=record, transaction=transactions[0])
