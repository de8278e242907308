"""Tests for inventory entities."""

from datetime import UTC, date

import pytest
from pydantic import ValidationError as PydanticValidationError

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


class TestInventoryRecord:
    """Tests for InventoryRecord entity."""

    def test_defaults(self):
        """Test default values."""
        record = InventoryRecord(product_id="PROD-001", sku="SKU-001")
        assert record.id is None
        assert record.current_stock == 0
        assert record.reserved_stock == 0
        assert record.available_stock == 0
        assert record.reorder_level == 10
        assert record.max_stock == 1000
        assert record.cost_price == 0.0
        assert record.average_cost == 0.0
        assert record.status == InventoryStatus.ACTIVE
        assert record.is_tracked is True
        assert record.is_perishable is False
        assert record.serial_numbers == []
        assert record.alerts == []
        assert record.version == 1

    def test_timestamps_are_timezone_aware(self):
        record = InventoryRecord(product_id="PROD-001", sku="SKU-001")
        assert record.created_at.tzinfo is not None
        assert record.updated_at.tzinfo is not None

    def test_total_value(self):
        """Test total_value property."""
        record = InventoryRecord(
            product_id="PROD-001", sku="SKU-001", current_stock=20, average_cost=2.5
        )
        assert record.total_value == 50.0

    def test_total_value_zero_stock(self):
        record = InventoryRecord(product_id="PROD-001", sku="SKU-001", average_cost=9.0)
        assert record.total_value == 0.0

    @pytest.mark.parametrize(
        ("current_stock", "expected"),
        [(0, False), (1, True), (10, True), (11, False)],
    )
    def test_is_low_stock(self, current_stock, expected):
        record = InventoryRecord(
            product_id="PROD-001",
            sku="SKU-001",
            current_stock=current_stock,
            reorder_level=10,
        )
        assert record.is_low_stock is expected

    def test_active_alerts_filters_resolved(self):
        record = InventoryRecord(
            product_id="PROD-001",
            sku="SKU-001",
            alerts=[
                StockAlert(alert_type=AlertType.LOW_STOCK, message="old", is_active=False),
                StockAlert(alert_type=AlertType.OVERSTOCK, message="now"),
            ],
        )
        assert [a.alert_type for a in record.active_alerts] == [AlertType.OVERSTOCK]
        assert record.has_active_alert(AlertType.OVERSTOCK)
        assert not record.has_active_alert(AlertType.LOW_STOCK)

    def test_location_and_expiry(self):
        record = InventoryRecord(
            product_id="PROD-001",
            sku="SKU-001",
            location=StockLocation(warehouse="WH-1", aisle="A3", bin="07"),
            expiry_date=date(2030, 1, 31),
            is_perishable=True,
        )
        assert record.location.warehouse == "WH-1"
        assert record.location.zone is None
        assert record.expiry_date == date(2030, 1, 31)

    def test_status_from_string(self):
        record = InventoryRecord(product_id="PROD-001", sku="SKU-001", status="discontinued")
        assert record.status == InventoryStatus.DISCONTINUED


class TestStockTransaction:
    """Tests for StockTransaction entity."""

    def test_defaults(self):
        txn = StockTransaction(
            transaction_type=TransactionType.PURCHASE,
            quantity=5,
            performed_by="alice",
        )
        assert txn.id is None
        assert txn.reason is None
        assert txn.cost is None
        assert txn.created_at.tzinfo is not None

    def test_is_immutable(self):
        txn = StockTransaction(
            transaction_type=TransactionType.SALE,
            quantity=-3,
            performed_by="bob",
        )
        with pytest.raises(PydanticValidationError):
            txn.quantity = 3  # type: ignore[misc]

    def test_negative_quantity_for_removals(self):
        txn = StockTransaction(
            transaction_type=TransactionType.DAMAGE,
            quantity=-2,
            performed_by="bob",
        )
        assert txn.quantity == -2

    def test_transaction_type_values(self):
        assert {t.value for t in TransactionType} == {
            "purchase",
            "sale",
            "return",
            "adjustment",
            "transfer",
            "damage",
            "expired",
        }


class TestStockAlert:
    """Tests for StockAlert entity."""

    def test_defaults(self):
        alert = StockAlert(alert_type=AlertType.LOW_STOCK, message="low")
        assert alert.is_active is True
        assert alert.resolved_at is None

    def test_alert_type_values(self):
        assert {a.value for a in AlertType} == {
            "low_stock",
            "out_of_stock",
            "overstock",
            "expiry_warning",
            "expired",
        }


def test_utcnow_is_utc():
    assert utcnow().tzinfo == UTC
