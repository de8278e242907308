"""Abstract interface for the append-only stock transaction log."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.core.entities.inventory import StockTransaction


class ITransactionLog(ABC):
    """Read side of the stock ledger. Entries are written by the inventory store."""

    @abstractmethod
    async def list_transactions(
        self,
        inventory_record_id: int,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockTransaction]:
        """Get transactions for a record in ledger order (oldest first)."""
        pass

    @abstractmethod
    async def count_transactions(self, inventory_record_id: int) -> int:
        """Count all transactions recorded for a record."""
        pass
