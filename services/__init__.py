"""
Services layer for SignOrderLedger.

This module contains the business logic services:
- pricing_engine: Pure pricing of line items into a CostBreakdown
- draft_service: Immutable draft editing operations
- reconciliation: Remaining-balance computation from a full ledger
- CatalogService: Current catalog snapshot and price edits
- OrderService: Order and expense creation
- LedgerService: Ledger entries, approval and reconciliation
- InMemoryStore: Thread-safe persistence with unit_of_work()

Request Flow:
    Flask route
    ├── CatalogService.snapshot()
    ├── draft_service / pricing_engine (pure)
    └── OrderService / LedgerService
        └── InMemoryStore.unit_of_work()
"""

from .catalog_service import CatalogService
from .ledger_service import LedgerService
from .order_service import OrderService
from .store import InMemoryStore, LedgerRepository

__all__ = [
    "CatalogService",
    "LedgerService",
    "OrderService",
    "InMemoryStore",
    "LedgerRepository",
]
