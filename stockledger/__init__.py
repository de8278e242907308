"""Stock ledger: per-product stock counts, reservations and an append-only movement log."""

__version__ = "1.0.0"
