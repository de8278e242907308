"""Application use cases."""

from stockledger.application.use_cases.add_stock import AddStockResult, AddStockUseCase
from stockledger.application.use_cases.create_inventory_record import (
    CreateInventoryRecordResult,
    CreateInventoryRecordUseCase,
)
from stockledger.application.use_cases.release_reserved_stock import (
    ReleaseReservedStockResult,
    ReleaseReservedStockUseCase,
)
from stockledger.application.use_cases.remove_stock import (
    RemoveStockResult,
    RemoveStockUseCase,
)
from stockledger.application.use_cases.reserve_stock import (
    ReserveStockResult,
    ReserveStockUseCase,
)
from stockledger.application.use_cases.scan_stock_alerts import (
    ScanStockAlertsResult,
    ScanStockAlertsUseCase,
)
from stockledger.application.use_cases.update_inventory_settings import (
    UpdateInventorySettingsResult,
    UpdateInventorySettingsUseCase,
)

__all__ = [
    "CreateInventoryRecordUseCase",
    "CreateInventoryRecordResult",
    "AddStockUseCase",
    "AddStockResult",
    "RemoveStockUseCase",
    "RemoveStockResult",
    "ReserveStockUseCase",
    "ReserveStockResult",
    "ReleaseReservedStockUseCase",
    "ReleaseReservedStockResult",
    "UpdateInventorySettingsUseCase",
    "UpdateInventorySettingsResult",
    "ScanStockAlertsUseCase",
    "ScanStockAlertsResult",
]
