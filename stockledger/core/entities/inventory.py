"""Inventory domain entities."""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(UTC)


class InventoryStatus(str, Enum):
    """Lifecycle status of an inventory record."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"
    OUT_OF_STOCK = "out_of_stock"


class TransactionType(str, Enum):
    """Kinds of stock movement recorded in the ledger."""

    PURCHASE = "purchase"
    SALE = "sale"
    RETURN = "return"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"
    DAMAGE = "damage"
    EXPIRED = "expired"


class AlertType(str, Enum):
    """Kinds of stock alert."""

    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    OVERSTOCK = "overstock"
    EXPIRY_WARNING = "expiry_warning"
    EXPIRED = "expired"


class StockLocation(BaseModel):
    """Physical storage location of a product."""

    model_config = ConfigDict(extra="forbid")

    warehouse: str | None = None
    zone: str | None = None
    aisle: str | None = None
    shelf: str | None = None
    bin: str | None = None


class StockTransaction(BaseModel):
    """
    One immutable ledger entry.

    Quantity is signed: positive for additions, negative for removals.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    inventory_record_id: int | None = None  # FK → inventory_records.id
    transaction_type: TransactionType
    quantity: int
    performed_by: str
    reason: str | None = None
    reference: str | None = None  # e.g., order ID, purchase order
    notes: str | None = None
    cost: float | None = None
    created_at: datetime = Field(default_factory=utcnow)


class StockAlert(BaseModel):
    """Alert raised against an inventory record."""

    id: int | None = None
    inventory_record_id: int | None = None
    alert_type: AlertType
    message: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    resolved_at: datetime | None = None


class InventoryRecord(BaseModel):
    """Stock counts, cost data and alerts for a single product."""

    id: int | None = None
    product_id: str
    sku: str

    current_stock: int = 0
    reserved_stock: int = 0
    available_stock: int = 0  # derived: max(0, current - reserved)

    reorder_level: int = 10
    max_stock: int = 1000

    location: StockLocation | None = None
    supplier_id: str | None = None

    cost_price: float = 0.0
    average_cost: float = 0.0  # Weighted Average Cost
    last_purchase_price: float | None = None
    last_purchase_date: datetime | None = None
    last_sale_date: datetime | None = None

    expiry_date: date | None = None
    batch_number: str | None = None
    serial_numbers: list[str] = Field(default_factory=list)
    is_perishable: bool = False
    is_tracked: bool = True

    status: InventoryStatus = InventoryStatus.ACTIVE
    alerts: list[StockAlert] = Field(default_factory=list)

    version: int = 1  # optimistic concurrency token
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def active_alerts(self) -> list[StockAlert]:
        """Alerts that have not been resolved."""
        return [a for a in self.alerts if a.is_active]

    @property
    def total_value(self) -> float:
        """Total inventory value = current_stock * average_cost."""
        return self.current_stock * self.average_cost

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.current_stock <= self.reorder_level

    def has_active_alert(self, alert_type: AlertType) -> bool:
        return any(a.alert_type == alert_type for a in self.active_alerts)
