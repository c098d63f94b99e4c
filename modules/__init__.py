"""Helper modules for the SignOrderLedger application."""

__all__ = [
    "catalog_data",
    "numeric",
]
