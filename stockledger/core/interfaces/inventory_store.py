"""Abstract interface for inventory record storage."""

from abc import ABC, abstractmethod

from stockledger.core.entities.inventory import InventoryRecord, StockTransaction


class IInventoryStore(ABC):
    """Interface for inventory record persistence."""

    @abstractmethod
    async def create_record(
        self,
        record: InventoryRecord,
        transactions: list[StockTransaction] | None = None,
    ) -> tuple[InventoryRecord, list[StockTransaction]]:
        """
        Insert a new record with its alerts and opening transactions.

        Returns the stored record and the transactions with their IDs.
        Raises DuplicateInventoryRecordError if the product or SKU is taken.
        """
        pass

    @abstractmethod
    async def get_record(self, record_id: int) -> InventoryRecord | None:
        """Get inventory record by ID, alerts included."""
        pass

    @abstractmethod
    async def get_record_by_product(self, product_id: str) -> InventoryRecord | None:
        """Get inventory record by product ID."""
        pass

    @abstractmethod
    async def get_record_by_sku(self, sku: str) -> InventoryRecord | None:
        """Get inventory record by SKU."""
        pass

    @abstractmethod
    async def commit_mutation(
        self,
        record: InventoryRecord,
        expected_version: int,
        transactions: list[StockTransaction],
    ) -> tuple[InventoryRecord, list[StockTransaction]]:
        """
        Atomically persist a mutated record.

        The write only succeeds if the stored version still equals
        expected_version; otherwise ConcurrencyConflictError is raised and
        nothing is written. Returns the record with its new version and the
        appended transactions with their IDs.
        """
        pass

    @abstractmethod
    async def list_records(
        self, limit: int = 100, offset: int = 0
    ) -> list[InventoryRecord]:
        """List inventory records with pagination."""
        pass

    @abstractmethod
    async def list_low_stock(
        self, limit: int = 100, offset: int = 0
    ) -> list[InventoryRecord]:
        """List records whose current stock is at or below their reorder level."""
        pass
