"""
Core business logic services.

Layer-pure services that depend only on:
- stockledger/core/entities/*
- stockledger/core/exceptions.py

NO infrastructure imports.
"""

from stockledger.core.services.stock_ledger import StockLedger

__all__ = [
    "StockLedger",
]
