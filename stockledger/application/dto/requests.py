"""Request DTOs for the stock ledger use cases.

Pydantic v2 models validating caller input before a use case runs.
These are the ONLY contracts between callers and use cases.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from stockledger.core.entities.inventory import (
    InventoryStatus,
    StockLocation,
    TransactionType,
)


class CreateInventoryRecordRequest(BaseModel):
    """Request to onboard a product into inventory."""

    product_id: str = Field(..., min_length=1, description="Product identifier")
    sku: str = Field(..., min_length=1, description="Stock keeping unit, unique")
    initial_stock: int = Field(
        default=0,
        ge=0,
        description="Opening balance, booked as an adjustment transaction",
    )
    performed_by: str | None = Field(
        default=None,
        description="Acting user; required when initial_stock > 0",
    )
    unit_cost: float | None = Field(
        default=None,
        ge=0,
        description="Cost per unit of the opening balance",
    )
    cost_price: float = Field(default=0.0, ge=0, description="List cost price")
    reorder_level: int | None = Field(
        default=None,
        ge=0,
        description="Low-stock threshold (defaults to LEDGER_DEFAULT_REORDER_LEVEL)",
    )
    max_stock: int | None = Field(
        default=None,
        ge=0,
        description="Overstock threshold (defaults to LEDGER_DEFAULT_MAX_STOCK)",
    )
    location: StockLocation | None = None
    supplier_id: str | None = None
    expiry_date: date | None = None
    batch_number: str | None = None
    serial_numbers: list[str] = Field(default_factory=list)
    is_perishable: bool = False
    is_tracked: bool = True


class AddStockRequest(BaseModel):
    """Request to add stock to a record."""

    record_id: int = Field(..., description="Inventory record ID")
    quantity: int = Field(..., gt=0, description="Units to add")
    performed_by: str = Field(..., min_length=1, description="Acting user")
    transaction_type: TransactionType = TransactionType.PURCHASE
    reason: str | None = Field(default=None, description="Why the stock was added")
    cost: float | None = Field(
        default=None,
        ge=0,
        description="Cost per unit; updates the weighted average cost",
    )
    reference: str | None = Field(default=None, description="PO or invoice reference")
    notes: str | None = Field(default=None, description="Additional notes")


class RemoveStockRequest(BaseModel):
    """Request to remove stock from a record."""

    record_id: int = Field(..., description="Inventory record ID")
    quantity: int = Field(..., gt=0, description="Units to remove")
    performed_by: str = Field(..., min_length=1, description="Acting user")
    transaction_type: TransactionType = TransactionType.SALE
    reason: str | None = Field(default=None, description="Why the stock was removed")
    reference: str | None = Field(default=None, description="Order or document reference")
    notes: str | None = Field(default=None, description="Additional notes")


class ReserveStockRequest(BaseModel):
    """Request to hold stock against a pending order."""

    record_id: int = Field(..., description="Inventory record ID")
    quantity: int = Field(..., gt=0, description="Units to reserve")
    reference: str | None = Field(default=None, description="Order reference")


class ReleaseReservedStockRequest(BaseModel):
    """Request to release previously reserved stock."""

    record_id: int = Field(..., description="Inventory record ID")
    quantity: int = Field(..., ge=0, description="Units to release")
    reference: str | None = Field(default=None, description="Order reference")


class UpdateInventorySettingsRequest(BaseModel):
    """Request to change administrative settings of a record.

    Only fields explicitly set on the request are applied.
    """

    record_id: int = Field(..., description="Inventory record ID")
    reorder_level: int | None = Field(default=None, ge=0)
    max_stock: int | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    location: StockLocation | None = None
    supplier_id: str | None = None
    expiry_date: date | None = None
    batch_number: str | None = None
    serial_numbers: list[str] | None = None
    is_perishable: bool | None = None
    is_tracked: bool | None = None
    status: InventoryStatus | None = Field(
        default=None,
        description="active, inactive or discontinued",
    )

    def changes(self) -> dict[str, Any]:
        """Fields the caller set, ready for StockLedger.update_settings()."""
        return self.model_dump(exclude_unset=True, exclude={"record_id"})
