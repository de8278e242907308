"""
Stock Ledger Service.

Pure bookkeeping on a loaded InventoryRecord: stock additions and removals,
reservations, derived-field recomputation and alert scanning. Nothing here
touches storage; callers persist the record and the returned transactions
in one atomic commit.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stockledger.config import get_logger
from stockledger.core.entities.inventory import (
    AlertType,
    InventoryRecord,
    InventoryStatus,
    StockAlert,
    StockLocation,
    StockTransaction,
    TransactionType,
    utcnow,
)
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ValidationError,
)

logger = get_logger(__name__)

# Fields an administrator may change through update_settings()
SETTINGS_FIELDS = frozenset(
    {
        "reorder_level",
        "max_stock",
        "cost_price",
        "location",
        "supplier_id",
        "expiry_date",
        "batch_number",
        "serial_numbers",
        "is_perishable",
        "is_tracked",
        "status",
    }
)

NON_NULLABLE_SETTINGS = frozenset(
    {
        "reorder_level",
        "max_stock",
        "cost_price",
        "serial_numbers",
        "is_perishable",
        "is_tracked",
        "status",
    }
)

ADMIN_STATUSES = frozenset(
    {InventoryStatus.ACTIVE, InventoryStatus.INACTIVE, InventoryStatus.DISCONTINUED}
)


def _validate_quantity(quantity: Any, allow_zero: bool = False) -> int:
    # bool is an int subclass but never a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(quantity, "must be an integer")
    if quantity < 0 or (quantity == 0 and not allow_zero):
        raise InvalidQuantityError(
            quantity,
            "must not be negative" if allow_zero else "must be a positive integer",
        )
    return quantity


def _validate_actor(performed_by: str | None) -> str:
    if not performed_by or not performed_by.strip():
        raise ValidationError("performed_by", "an acting user is required")
    return performed_by


class StockLedger:
    """
    Layer-pure service implementing the stock ledger operations.

    Every mutating operation finishes with recompute(), so the derived
    fields are consistent before the caller commits.
    """

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def add_stock(
        self,
        record: InventoryRecord,
        quantity: int,
        performed_by: str,
        transaction_type: TransactionType = TransactionType.PURCHASE,
        reason: str | None = None,
        cost: float | None = None,
        reference: str | None = None,
        notes: str | None = None,
    ) -> StockTransaction:
        """
        Increase current stock and append a positive ledger entry.

        When a non-zero cost is given the average cost is recomputed as a
        weighted average of the stock on hand and the incoming units. A zero
        cost is treated like a missing one.
        """
        _validate_quantity(quantity)
        _validate_actor(performed_by)
        if cost is not None and cost < 0:
            raise ValidationError("cost", "must not be negative", cost)

        now = utcnow()
        old_stock = record.current_stock
        new_stock = old_stock + quantity
        record.current_stock = new_stock

        if cost:
            record.average_cost = (
                record.average_cost * old_stock + cost * quantity
            ) / new_stock

        if transaction_type == TransactionType.PURCHASE:
            record.last_purchase_date = now
            if cost:
                record.last_purchase_price = cost

        transaction = StockTransaction(
            inventory_record_id=record.id,
            transaction_type=transaction_type,
            quantity=quantity,
            performed_by=performed_by,
            reason=reason,
            reference=reference,
            notes=notes,
            cost=cost,
            created_at=now,
        )
        self.recompute(record)

        logger.debug(
            "stock_added",
            record_id=record.id,
            quantity=quantity,
            type=transaction_type.value,
            current_stock=record.current_stock,
        )
        return transaction

    def remove_stock(
        self,
        record: InventoryRecord,
        quantity: int,
        performed_by: str,
        transaction_type: TransactionType = TransactionType.SALE,
        reason: str | None = None,
        reference: str | None = None,
        notes: str | None = None,
    ) -> StockTransaction:
        """
        Decrease current stock and append a negative ledger entry.

        Raises InsufficientStockError, leaving the record untouched, when the
        quantity exceeds the available stock.
        """
        _validate_quantity(quantity)
        _validate_actor(performed_by)

        if quantity > record.available_stock:
            logger.info(
                "insufficient_stock",
                record_id=record.id,
                requested=quantity,
                available=record.available_stock,
                operation="remove",
            )
            raise InsufficientStockError(record.id, quantity, record.available_stock)

        now = utcnow()
        record.current_stock -= quantity
        if transaction_type == TransactionType.SALE:
            record.last_sale_date = now

        transaction = StockTransaction(
            inventory_record_id=record.id,
            transaction_type=transaction_type,
            quantity=-quantity,
            performed_by=performed_by,
            reason=reason,
            reference=reference,
            notes=notes,
            created_at=now,
        )
        self.recompute(record)

        logger.debug(
            "stock_removed",
            record_id=record.id,
            quantity=quantity,
            type=transaction_type.value,
            current_stock=record.current_stock,
        )
        return transaction

    # -------------------------------------------------------------------
    # Reservations (soft holds, no ledger entry)
    # -------------------------------------------------------------------
    def reserve_stock(self, record: InventoryRecord, quantity: int) -> None:
        """Hold stock against a pending order."""
        _validate_quantity(quantity)

        if quantity > record.available_stock:
            logger.info(
                "insufficient_stock",
                record_id=record.id,
                requested=quantity,
                available=record.available_stock,
                operation="reserve",
            )
            raise InsufficientStockError(record.id, quantity, record.available_stock)

        record.reserved_stock += quantity
        self.recompute(record)

        logger.debug(
            "stock_reserved",
            record_id=record.id,
            quantity=quantity,
            reserved_stock=record.reserved_stock,
            available_stock=record.available_stock,
        )

    def release_reserved_stock(self, record: InventoryRecord, quantity: int) -> None:
        """Release held stock. Over-release clamps reserved stock at zero."""
        _validate_quantity(quantity, allow_zero=True)
        record.reserved_stock = max(0, record.reserved_stock - quantity)
        self.recompute(record)

        logger.debug(
            "reserved_stock_released",
            record_id=record.id,
            quantity=quantity,
            reserved_stock=record.reserved_stock,
        )

    # -------------------------------------------------------------------
    # Onboarding and administration
    # -------------------------------------------------------------------
    def open_record(
        self,
        record: InventoryRecord,
        initial_stock: int = 0,
        performed_by: str | None = None,
        cost: float | None = None,
    ) -> list[StockTransaction]:
        """Prepare a new record, booking any opening balance as an adjustment."""
        _validate_quantity(initial_stock, allow_zero=True)
        record.current_stock = 0
        record.reserved_stock = 0

        if initial_stock == 0:
            self.recompute(record)
            return []

        transaction = self.add_stock(
            record,
            initial_stock,
            performed_by=performed_by,  # type: ignore[arg-type]
            transaction_type=TransactionType.ADJUSTMENT,
            reason="Opening balance",
            cost=cost,
        )
        return [transaction]

    def update_settings(self, record: InventoryRecord, changes: dict[str, Any]) -> None:
        """Apply administrative changes (thresholds, cost price, location, status)."""
        unknown = set(changes) - SETTINGS_FIELDS
        if unknown:
            raise ValidationError(
                "settings", f"unknown fields: {', '.join(sorted(unknown))}"
            )

        for name in NON_NULLABLE_SETTINGS & set(changes):
            if changes[name] is None:
                raise ValidationError(name, "must not be null")

        for name in ("reorder_level", "max_stock"):
            value = changes.get(name)
            if name in changes and (
                isinstance(value, bool) or not isinstance(value, int) or value < 0
            ):
                raise ValidationError(name, "must be a non-negative integer", value)

        if "cost_price" in changes:
            value = changes["cost_price"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValidationError("cost_price", "must be a non-negative number", value)

        if "status" in changes:
            try:
                status = InventoryStatus(changes["status"])
            except ValueError as e:
                raise ValidationError("status", "unknown status", changes["status"]) from e
            if status not in ADMIN_STATUSES:
                raise ValidationError(
                    "status", "out_of_stock is derived from stock levels", status.value
                )
            changes = {**changes, "status": status}

        if isinstance(changes.get("location"), dict):
            try:
                location = StockLocation(**changes["location"])
            except PydanticValidationError as e:
                raise ValidationError("location", "invalid location", changes["location"]) from e
            changes = {**changes, "location": location}

        for name, value in changes.items():
            setattr(record, name, value)

        self.recompute(record)

    # -------------------------------------------------------------------
    # Derived fields
    # -------------------------------------------------------------------
    def recompute(self, record: InventoryRecord) -> list[StockAlert]:
        """
        Refresh derived fields before a commit.

        - available = max(0, current - reserved)
        - status follows stock for active/out_of_stock records only
        - a low_stock alert is raised once while 0 < current <= reorder level,
          and resolved when stock climbs above the reorder level

        Returns the alerts raised by this pass.
        """
        record.available_stock = max(0, record.current_stock - record.reserved_stock)
        raised: list[StockAlert] = []

        if record.current_stock <= 0:
            if record.status == InventoryStatus.ACTIVE:
                record.status = InventoryStatus.OUT_OF_STOCK
            return raised

        if record.status == InventoryStatus.OUT_OF_STOCK:
            record.status = InventoryStatus.ACTIVE

        if record.current_stock <= record.reorder_level:
            if not record.has_active_alert(AlertType.LOW_STOCK):
                alert = self._raise_alert(
                    record,
                    AlertType.LOW_STOCK,
                    f"Stock level is low ({record.current_stock} remaining)",
                )
                raised.append(alert)
        else:
            self._resolve_alerts(record, AlertType.LOW_STOCK)

        return raised

    def scan_alerts(
        self,
        record: InventoryRecord,
        today: date | None = None,
        expiry_warning_days: int = 30,
    ) -> list[StockAlert]:
        """
        Evaluate the alert types that are not raised inline.

        Covers out_of_stock, overstock, expiry_warning and expired. Returns
        every alert raised or resolved by the scan; an empty list means the
        record is unchanged.
        """
        today = today or date.today()
        changed: list[StockAlert] = []

        def toggle(alert_type: AlertType, condition: bool, message: str) -> None:
            if condition:
                if not record.has_active_alert(alert_type):
                    changed.append(self._raise_alert(record, alert_type, message))
            else:
                changed.extend(self._resolve_alerts(record, alert_type))

        toggle(
            AlertType.OUT_OF_STOCK,
            record.current_stock <= 0,
            "Product is out of stock",
        )
        toggle(
            AlertType.OVERSTOCK,
            record.current_stock > record.max_stock,
            f"Stock level exceeds maximum ({record.current_stock} on hand, "
            f"max {record.max_stock})",
        )

        expired = record.expiry_date is not None and record.expiry_date <= today
        expiring = (
            record.expiry_date is not None
            and not expired
            and (record.expiry_date - today).days <= expiry_warning_days
        )
        toggle(
            AlertType.EXPIRED,
            expired,
            f"Stock expired on {record.expiry_date}",
        )
        toggle(
            AlertType.EXPIRY_WARNING,
            expiring,
            f"Stock expires on {record.expiry_date}",
        )

        if changed:
            self.recompute(record)
        return changed

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _raise_alert(
        self, record: InventoryRecord, alert_type: AlertType, message: str
    ) -> StockAlert:
        alert = StockAlert(
            inventory_record_id=record.id,
            alert_type=alert_type,
            message=message,
        )
        record.alerts.append(alert)
        logger.info(
            f"{alert_type.value}_alert_raised",
            record_id=record.id,
            sku=record.sku,
            current_stock=record.current_stock,
        )
        return alert

    def _resolve_alerts(
        self, record: InventoryRecord, alert_type: AlertType
    ) -> list[StockAlert]:
        resolved: list[StockAlert] = []
        now: datetime = utcnow()
        for alert in record.active_alerts:
            if alert.alert_type == alert_type:
                alert.is_active = False
                alert.resolved_at = now
                resolved.append(alert)
        return resolved
