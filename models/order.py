"""
Order and expense data models.

These are the parents that ledger entries are recorded against.

Lifecycle:
    1. Draft is priced into a CostBreakdown
    2. Order is created with total_amount = final cost in whole units
    3. Baseline advance is stored on the order (not as a ledger row)
    4. Ledger entries arrive; remaining_balance is recomputed each time

Thread Safety:
    - Order and Expense are frozen dataclasses
    - The only field that changes after creation is remaining_balance,
      which the store replaces via with_balance()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Any, Optional

from models.cost_breakdown import CostBreakdown
from models.ledger import (
    EntryKind,
    EntryStatus,
    LedgerEntry,
    ParentKind,
    PaymentMethod,
    baseline_entry_id,
)


@dataclass(frozen=True)
class Order:
    """
    A saved customer order.

    total_amount is frozen at save time; later catalog price changes never
    touch it.
    """

    id: str
    customer_name: str
    total_amount: int
    """Final cost of the priced draft, in whole currency units."""

    payment_method: PaymentMethod
    """Method used for the baseline advance."""

    baseline_advance: int
    """Advance taken when the order was created. Always counted as paid."""

    created_at: datetime
    phone_number: str = ""
    breakdown: Optional[CostBreakdown] = None
    """Full-precision pricing snapshot (for receipts and exports)."""

    remaining_balance: int = 0
    """Last reconciled balance, written by the ledger service."""

    parent_kind: ParentKind = field(default=ParentKind.ORDER, init=False)

    def with_balance(self, remaining_balance: int) -> "Order":
        return replace(self, remaining_balance=remaining_balance)

    def baseline_entry(self) -> LedgerEntry:
        """Read-only ledger view of the baseline advance."""
        return _baseline_entry(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "id": self.id,
            "parent_kind": self.parent_kind.value,
            "customer_name": self.customer_name,
            "phone_number": self.phone_number,
            "total_amount": self.total_amount,
            "payment_method": self.payment_method.value,
            "baseline_advance": self.baseline_advance,
            "remaining_balance": self.remaining_balance,
            "created_at": self.created_at.isoformat(),
            "breakdown": self.breakdown.to_display_dict() if self.breakdown else None,
        }


@dataclass(frozen=True)
class Expense:
    """
    A business expense paid in one or more installments.

    Expense ledger entries have no approval workflow.
    """

    id: str
    name: str
    total_amount: int
    payment_method: PaymentMethod
    baseline_advance: int
    created_at: datetime
    remaining_balance: int = 0

    parent_kind: ParentKind = field(default=ParentKind.EXPENSE, init=False)

    def with_balance(self, remaining_balance: int) -> "Expense":
        return replace(self, remaining_balance=remaining_balance)

    def baseline_entry(self) -> LedgerEntry:
        """Read-only ledger view of the baseline advance."""
        return _baseline_entry(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "parent_kind": self.parent_kind.value,
            "name": self.name,
            "total_amount": self.total_amount,
            "payment_method": self.payment_method.value,
            "baseline_advance": self.baseline_advance,
            "remaining_balance": self.remaining_balance,
            "created_at": self.created_at.isoformat(),
        }


def _baseline_entry(parent) -> LedgerEntry:
    return LedgerEntry(
        id=baseline_entry_id(parent.id),
        parent_id=parent.id,
        parent_kind=parent.parent_kind,
        amount=parent.baseline_advance,
        kind=EntryKind.ADVANCE,
        method=parent.payment_method,
        status=EntryStatus.APPROVED,
        entry_date=parent.created_at.date(),
        description="Baseline advance",
        created_at=parent.created_at,
        is_baseline=True,
    )
