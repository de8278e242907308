"""Create Inventory Record Use Case — product onboarding with opening balance."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import CreateInventoryRecordRequest
from stockledger.application.services import get_stock_ledger
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.exceptions import DuplicateInventoryRecordError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class CreateInventoryRecordResult:
    """Result of creating an inventory record."""

    record: InventoryRecord
    transactions: list[StockTransaction] = field(default_factory=list)


class CreateInventoryRecordUseCase:
    """Create the single inventory record of a product."""

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
        self, request: CreateInventoryRecordRequest
    ) -> CreateInventoryRecordResult:
        """Execute create inventory record use case."""
        logger.info(
            "create_inventory_record_started",
            product_id=request.product_id,
            sku=request.sku,
            initial_stock=request.initial_stock,
        )

        store = await self._get_inventory_store()

        # Fail fast; the UNIQUE constraints still guard the insert itself
        if await store.get_record_by_product(request.product_id) is not None or (
            await store.get_record_by_sku(request.sku) is not None
        ):
            raise DuplicateInventoryRecordError(request.product_id, request.sku)

        defaults = get_settings().ledger
        record = InventoryRecord(
            product_id=request.product_id,
            sku=request.sku,
            reorder_level=(
                request.reorder_level
                if request.reorder_level is not None
                else defaults.default_reorder_level
            ),
            max_stock=(
                request.max_stock
                if request.max_stock is not None
                else defaults.default_max_stock
            ),
            location=request.location,
            supplier_id=request.supplier_id,
            cost_price=request.cost_price,
            expiry_date=request.expiry_date,
            batch_number=request.batch_number,
            serial_numbers=list(request.serial_numbers),
            is_perishable=request.is_perishable,
            is_tracked=request.is_tracked,
        )

        transactions = self._ledger.open_record(
            record,
            initial_stock=request.initial_stock,
            performed_by=request.performed_by,
            cost=request.unit_cost,
        )
        record, transactions = await store.create_record(record, transactions)

        logger.info(
            "create_inventory_record_complete",
            record_id=record.id,
            current_stock=record.current_stock,
            status=record.status.value,
        )

        return CreateInventoryRecordResult(record=record, transactions=transactions)
