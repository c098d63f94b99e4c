"""
Data models for SignOrderLedger.

This module contains immutable dataclasses for:
- Catalog: Versioned price-list snapshot (Material, Service)
- LineItem / DraftState: An order being assembled
- CostBreakdown: Pricing result for a draft
- Order / Expense: Parents that payments are recorded against
- LedgerEntry: One payment with its approval status

All dataclasses are frozen so they can be shared between request threads
without locks; changes produce new instances.
"""

from .catalog import Catalog, Material, Service, PricingCategory, ServicePricingMode, NO_SERVICE
from .line_item import LineItem, DraftState
from .cost_breakdown import CostBreakdown
from .ledger import LedgerEntry, EntryKind, EntryStatus, ParentKind, PaymentMethod
from .order import Order, Expense

__all__ = [
    # Catalog models
    "Catalog",
    "Material",
    "Service",
    "PricingCategory",
    "ServicePricingMode",
    "NO_SERVICE",
    # Draft models
    "LineItem",
    "DraftState",
    "CostBreakdown",
    # Ledger models
    "LedgerEntry",
    "EntryKind",
    "EntryStatus",
    "ParentKind",
    "PaymentMethod",
    "Order",
    "Expense",
]
