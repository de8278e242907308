"""
Domain exceptions for the stock ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for error reporting."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class InventoryRecordNotFoundError(StorageError):
    """Inventory record not found in storage."""

    def __init__(self, record_id: int | str):
        super().__init__(
            f"Inventory record not found: {record_id}",
            code="INVENTORY_RECORD_NOT_FOUND",
            details={"record_id": record_id},
        )


class DuplicateInventoryRecordError(StorageError):
    """An inventory record already exists for the product or SKU."""

    def __init__(self, product_id: str, sku: str):
        super().__init__(
            f"Inventory record already exists for product {product_id} or SKU {sku}",
            code="DUPLICATE_INVENTORY_RECORD",
            details={"product_id": product_id, "sku": sku},
        )


# Concurrency Exceptions
class ConcurrencyConflictError(LedgerError):
    """A commit was rejected because the record changed since it was read."""

    def __init__(self, record_id: int, expected_version: int):
        super().__init__(
            f"Inventory record {record_id} was modified concurrently "
            f"(expected version {expected_version})",
            code="CONCURRENCY_CONFLICT",
            details={"record_id": record_id, "expected_version": expected_version},
        )


# Stock Exceptions
class StockError(LedgerError):
    """Base exception for stock movement rules."""

    pass


class InsufficientStockError(StockError):
    """Requested quantity exceeds the available stock."""

    def __init__(self, record_id: int | None, requested: int, available: int):
        super().__init__(
            f"Insufficient stock available: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "record_id": record_id,
                "requested": requested,
                "available": available,
            },
        )


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Quantity is not an acceptable integer for the operation."""

    def __init__(self, quantity: Any, message: str = "must be a positive integer"):
        super().__init__(field="quantity", message=message, value=quantity)
        self.code = "INVALID_QUANTITY"
