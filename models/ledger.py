"""
Payment ledger models.

These models represent money received against an order or paid out against
an expense. Entries are appended by users, change only through the status
state machine, and may be deleted. The parent's baseline advance is not a
stored entry; baseline_entry() builds a read-only view of it for history
tables.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional

from core.exceptions import InvalidTransitionError, ValidationError


BASELINE_SUFFIX = ":baseline"
"""Suffix of the synthetic entry id representing a parent's baseline advance."""


def baseline_entry_id(parent_id: str) -> str:
    """Id of the synthetic baseline-advance entry for a parent."""
    return f"{parent_id}{BASELINE_SUFFIX}"


def is_baseline_entry_id(entry_id: str) -> bool:
    return entry_id.endswith(BASELINE_SUFFIX)


class _ParsableEnum(Enum):
    """Enum that raises ValidationError instead of ValueError on bad input."""

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValidationError(
                f"{cls.__name__} must be a string",
                field=cls.__name__,
                value=value,
            )
        aliases = getattr(cls, "_aliases", lambda: {})()
        value = aliases.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Unknown {cls.__name__}: {value}",
                field=cls.__name__,
                value=value,
            )


class PaymentMethod(_ParsableEnum):
    """How money was paid."""

    CASH = "cash"
    DIGITAL_WALLET = "digital_wallet"
    BANK_TRANSFER = "bank_transfer"

    @staticmethod
    def _aliases() -> Dict[str, str]:
        return {"click": "digital_wallet", "transfer": "bank_transfer"}


class EntryKind(_ParsableEnum):
    """Kind of ledger entry."""

    ADVANCE = "advance"
    PAYMENT = "payment"


class ParentKind(_ParsableEnum):
    """What a ledger entry is recorded against."""

    ORDER = "order"
    """Customer order: entries go through approval."""

    EXPENSE = "expense"
    """Business expense: entries are always approved."""


class EntryStatus(_ParsableEnum):
    """
    Approval status of a ledger entry.

    Lifecycle:
        PENDING -> (APPROVED | REJECTED)

    Only APPROVED entries count toward the paid total.
    """

    PENDING = "pending"
    """Recorded by a non-privileged actor, awaiting manager review."""

    APPROVED = "approved"
    """Counts toward the paid total. Terminal."""

    REJECTED = "rejected"
    """Never counts. Terminal."""

    @property
    def is_terminal(self) -> bool:
        return self is not EntryStatus.PENDING

    @classmethod
    def initial(cls, parent_kind: ParentKind, privileged: bool) -> "EntryStatus":
        """
        Initial status for a new entry.

        Expense entries have no approval workflow. Order entries are approved
        immediately only when the recording actor is privileged.
        """
        if parent_kind is ParentKind.EXPENSE or privileged:
            return cls.APPROVED
        return cls.PENDING


@dataclass(frozen=True)
class LedgerEntry:
    """
    One recorded monetary movement against an order or expense.

    Use with_status() to move through the approval state machine; it
    enforces that only pending entries can change.
    """

    id: str
    """Unique entry id."""

    parent_id: str
    """Order or expense id."""

    parent_kind: ParentKind
    amount: int
    """Amount in whole currency units, always > 0."""

    kind: EntryKind
    method: PaymentMethod
    status: EntryStatus
    entry_date: date
    """Business date of the payment (may differ from created_at)."""

    description: str = ""
    created_at: Optional[datetime] = None
    is_baseline: bool = False
    """True only for the synthetic view of the parent's baseline advance."""

    @property
    def counts_toward_balance(self) -> bool:
        """Whether this entry is included in the paid total."""
        if self.parent_kind is ParentKind.EXPENSE:
            return True
        return self.status is EntryStatus.APPROVED

    def with_status(self, new_status: EntryStatus) -> "LedgerEntry":
        """
        Return a copy in a new status.

        Raises:
            InvalidTransitionError: If this entry is terminal or the new
                status is not a terminal state
        """
        if self.is_baseline:
            raise InvalidTransitionError(
                "The baseline advance cannot change status",
                entry_id=self.id,
            )
        if self.status.is_terminal or not new_status.is_terminal:
            raise InvalidTransitionError(
                f"Cannot change status from {self.status.value} to {new_status.value}",
                entry_id=self.id,
                current=self.status.value,
                requested=new_status.value,
            )
        return replace(self, status=new_status)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "parent_kind": self.parent_kind.value,
            "amount": self.amount,
            "kind": self.kind.value,
            "method": self.method.value,
            "status": self.status.value,
            "entry_date": self.entry_date.isoformat(),
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "is_baseline": self.is_baseline,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerEntry":
        """Create from dictionary."""
        created_at_str = data.get("created_at")
        return cls(
            id=data["id"],
            parent_id=data["parent_id"],
            parent_kind=ParentKind.parse(data.get("parent_kind", "order")),
            amount=int(data["amount"]),
            kind=EntryKind.parse(data.get("kind", "payment")),
            method=PaymentMethod.parse(data.get("method", "cash")),
            status=EntryStatus.parse(data.get("status", "pending")),
            entry_date=date.fromisoformat(data["entry_date"]),
            description=data.get("description", ""),
            created_at=datetime.fromisoformat(created_at_str) if created_at_str else None,
            is_baseline=data.get("is_baseline", False),
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
