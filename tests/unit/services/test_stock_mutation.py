"""Tests for the application-level read-modify-write helper."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.services import apply_stock_mutation, get_stock_ledger
from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    InventoryRecordNotFoundError,
)
from stockledger.core.services import StockLedger


@pytest.fixture
def store(sample_record):
    store = AsyncMock()
    store.get_record.side_effect = lambda record_id: sample_record.model_copy(deep=True)
    store.commit_mutation.side_effect = lambda record, version, txns: (record, txns)
    return store


class TestApplyStockMutation:
    async def test_commits_with_read_version(self, store):
        def mutate(record):
            record.reserved_stock += 1
            return []

        record, transactions = await apply_stock_mutation(store, 1, mutate)

        assert record.reserved_stock == 1
        assert transactions == []
        _, expected_version, _ = store.commit_mutation.call_args[0]
        assert expected_version == 1

    async def test_none_skips_commit(self, store):
        record, transactions = await apply_stock_mutation(store, 1, lambda record: None)

        assert record.id == 1
        assert transactions == []
        store.commit_mutation.assert_not_called()

    async def test_missing_record(self, store):
        store.get_record.side_effect = None
        store.get_record.return_value = None

        with pytest.raises(InventoryRecordNotFoundError):
            await apply_stock_mutation(store, 42, lambda record: [])

    async def test_retries_after_conflict(self, store):
        outcomes = iter([ConcurrencyConflictError(1, 1), None])

        def commit(record, version, txns):
            outcome = next(outcomes)
            if outcome is not None:
                raise outcome
            return record, txns

        store.commit_mutation.side_effect = commit
        calls = []

        def mutate(record):
            calls.append(record.version)
            return []

        await apply_stock_mutation(store, 1, mutate, max_retries=3)

        assert len(calls) == 2
        assert store.get_record.await_count == 2

    async def test_gives_up_after_max_retries(self, store):
        store.commit_mutation.side_effect = ConcurrencyConflictError(1, 1)

        with pytest.raises(ConcurrencyConflictError):
            await apply_stock_mutation(store, 1, lambda record: [], max_retries=2)

        assert store.commit_mutation.await_count == 3

    async def test_max_retries_from_settings(self, store, monkeypatch):
        monkeypatch.setenv("LEDGER_MAX_CONFLICT_RETRIES", "0")
        store.commit_mutation.side_effect = ConcurrencyConflictError(1, 1)

        with pytest.raises(ConcurrencyConflictError):
            await apply_stock_mutation(store, 1, lambda record: [])

        assert store.commit_mutation.await_count == 1

    async def test_mutation_errors_propagate_without_retry(self, store):
        def mutate(record):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await apply_stock_mutation(store, 1, mutate)

        assert store.get_record.await_count == 1


def test_get_stock_ledger_is_singleton():
    assert isinstance(get_stock_ledger(), StockLedger)
    assert get_stock_ledger() is get_stock_ledger()
