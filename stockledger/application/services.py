"""
Service factory functions and the read-modify-write helper.

This module wires the core StockLedger service for the use cases and
owns the optimistic-concurrency loop every stock mutation goes through.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from collections.abc import Callable

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.inventory import InventoryRecord, StockTransaction
from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    InventoryRecordNotFoundError,
)
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)

# A mutation edits the record in place and returns the ledger entries to
# append, or None when there is nothing to commit.
StockMutation = Callable[[InventoryRecord], list[StockTransaction] | None]

# Singleton service instances
_stock_ledger: StockLedger | None = None


def get_stock_ledger() -> StockLedger:
    """Get or create the StockLedger service instance."""
    global _stock_ledger
    if _stock_ledger is None:
        _stock_ledger = StockLedger()
    return _stock_ledger


async def apply_stock_mutation(
    store: IInventoryStore,
    record_id: int,
    mutate: StockMutation,
    max_retries: int | None = None,
) -> tuple[InventoryRecord, list[StockTransaction]]:
    """
    Run one atomic read-modify-write cycle against a record.

    The record is read, mutated and committed with a compare-and-swap on
    its version. When another writer commits first, the record is read
    again and the mutation re-runs against the fresh state, so its
    preconditions are checked against the winner's result.

    Args:
        store: Inventory store to read from and commit to
        record_id: Record to mutate
        mutate: Callback applying the ledger operation
        max_retries: Re-reads allowed after a conflict
            (default LEDGER_MAX_CONFLICT_RETRIES)

    Returns:
        The committed record and the appended transactions

    Raises:
        InventoryRecordNotFoundError: If the record does not exist
        ConcurrencyConflictError: If every attempt lost the race
    """
    if max_retries is None:
        max_retries = get_settings().ledger.max_conflict_retries

    attempt = 0
    while True:
        record = await store.get_record(record_id)
        if record is None:
            raise InventoryRecordNotFoundError(record_id)

        expected_version = record.version
        transactions = mutate(record)
        if transactions is None:
            return record, []

        try:
            return await store.commit_mutation(record, expected_version, transactions)
        except ConcurrencyConflictError:
            if attempt >= max_retries:
                logger.warning(
                    "stock_mutation_conflict_exhausted",
                    record_id=record_id,
                    attempts=attempt + 1,
                )
                raise
            attempt += 1
            logger.info(
                "stock_mutation_conflict",
                record_id=record_id,
                expected_version=expected_version,
                attempt=attempt,
            )
