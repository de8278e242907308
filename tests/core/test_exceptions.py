"""Unit tests for domain exceptions."""

import pytest

from stockledger.core.exceptions import (
    ConcurrencyConflictError,
    DuplicateInventoryRecordError,
    InsufficientStockError,
    InvalidQuantityError,
    InventoryRecordNotFoundError,
    LedgerError,
    StockError,
    StorageError,
    ValidationError,
)


class TestLedgerError:
    """Tests for base LedgerError exception."""

    def test_basic_initialization(self):
        error = LedgerError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "LedgerError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = LedgerError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = LedgerError("Test error", code="TEST", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST",
            "message": "Test error",
            "details": {"key": "value"},
        }

    def test_can_be_raised_and_caught(self):
        with pytest.raises(LedgerError) as exc_info:
            raise LedgerError("Test")
        assert exc_info.value.message == "Test"


class TestStorageErrors:
    def test_record_not_found(self):
        error = InventoryRecordNotFoundError(42)
        assert isinstance(error, StorageError)
        assert error.code == "INVENTORY_RECORD_NOT_FOUND"
        assert error.details == {"record_id": 42}
        assert "42" in error.message

    def test_duplicate_record(self):
        error = DuplicateInventoryRecordError("PROD-1", "SKU-1")
        assert isinstance(error, StorageError)
        assert error.code == "DUPLICATE_INVENTORY_RECORD"
        assert error.details == {"product_id": "PROD-1", "sku": "SKU-1"}


class TestConcurrencyConflictError:
    def test_details(self):
        error = ConcurrencyConflictError(7, 3)
        assert isinstance(error, LedgerError)
        assert not isinstance(error, StockError)
        assert error.code == "CONCURRENCY_CONFLICT"
        assert error.details == {"record_id": 7, "expected_version": 3}


class TestInsufficientStockError:
    def test_message_and_details(self):
        error = InsufficientStockError(1, requested=60, available=40)
        assert isinstance(error, StockError)
        assert error.code == "INSUFFICIENT_STOCK"
        assert error.message == "Insufficient stock available: requested 60, available 40"
        assert error.details == {"record_id": 1, "requested": 60, "available": 40}


class TestValidationErrors:
    def test_validation_error(self):
        error = ValidationError("performed_by", "an acting user is required")
        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "performed_by"
        assert error.details["value"] is None

    def test_validation_error_truncates_value(self):
        error = ValidationError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_invalid_quantity(self):
        error = InvalidQuantityError(-5)
        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_QUANTITY"
        assert error.details["field"] == "quantity"
        assert error.details["value"] == "-5"
        assert "must be a positive integer" in error.message
