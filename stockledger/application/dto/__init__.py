"""Data Transfer Objects for the application layer.

Request DTOs: Validate and parse incoming use case requests.
"""

from stockledger.application.dto.requests import (
    AddStockRequest,
    CreateInventoryRecordRequest,
    ReleaseReservedStockRequest,
    RemoveStockRequest,
    ReserveStockRequest,
    UpdateInventorySettingsRequest,
)

__all__ = [
    "CreateInventoryRecordRequest",
    "AddStockRequest",
    "RemoveStockRequest",
    "ReserveStockRequest",
    "ReleaseReservedStockRequest",
    "UpdateInventorySettingsRequest",
]
