"""
Payment ledger service.

Records payments against orders and expenses and keeps each parent's
remaining balance in step with its ledger.

Every mutation follows the same steps inside one unit of work:
    1. Validate the request
    2. Mutate the ledger (append / status change / delete)
    3. Reload the FULL ledger of the parent
    4. reconcile() from scratch
    5. Persist the new balance

If step 5 fails, the store rolls back step 2 and the error propagates to
the caller, which may retry the whole operation. The service never
retries by itself.

Approval:
    Order entries start APPROVED when the recording actor is privileged,
    PENDING otherwise. The caller passes privileged explicitly. Expense
    entries are always APPROVED.

Usage:
    ledger = LedgerService(store)
    entry = ledger.add_entry(order.id, 300000, "payment", "cash", privileged=False)
    ledger.set_status(entry.id, "approved")
    ledger.delete_entry(entry.id)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Union

from core.exceptions import InvalidTransitionError, ValidationError
from models.ledger import (
    EntryKind,
    EntryStatus,
    LedgerEntry,
    PaymentMethod,
    is_baseline_entry_id,
    utc_now,
)
from modules.numeric import parse_whole
from services.reconciliation import reconcile
from services.store import LedgerRepository
from logging_config import get_logger, get_parent_logger


# Module logger
logger = get_logger(__name__)

# Sort key for entries without a creation timestamp
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class LedgerService:
    """
    Service for recording and reviewing ledger entries.

    Attributes:
        repository: Persistence backend (InMemoryStore or equivalent)
    """

    def __init__(self, repository: LedgerRepository):
        """
        Initialize ledger service.

        Args:
            repository: Persistence backend implementing LedgerRepository
        """
        self._repository = repository
        logger.info("LedgerService initialized")

    @property
    def repository(self) -> LedgerRepository:
        return self._repository

    def add_entry(
        self,
        parent_id: str,
        amount: Any,
        kind: Union[str, EntryKind] = EntryKind.PAYMENT,
        method: Union[str, PaymentMethod] = PaymentMethod.CASH,
        description: str = "",
        entry_date: Optional[Union[str, date]] = None,
        privileged: bool = False,
        entry_id: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Record a payment against an order or expense.

        Args:
            parent_id: Order or expense id
            amount: Positive whole amount
            kind: "advance" or "payment"
            method: "cash", "digital_wallet" or "bank_transfer"
            description: Free-text note
            entry_date: Business date (ISO string or date), defaults to today
            privileged: Whether the recording actor may skip approval
            entry_id: Optional id (generated if not provided)

        Returns:
            The created entry with its initial status

        Raises:
            ValidationError: Non-positive or fractional amount, bad kind,
                method or date, or an entry_id reserved for the
                baseline advance
            UnknownReferenceError: Unknown parent
        """
        value = parse_whole(amount, "amount")
        entry_kind = EntryKind.parse(kind)
        entry_method = PaymentMethod.parse(method)
        business_date = _parse_date(entry_date)
        if entry_id and is_baseline_entry_id(entry_id):
            raise ValidationError(
                "Entry ids ending in the baseline suffix are reserved",
                field="entry_id",
                value=entry_id,
            )

        with self._repository.unit_of_work():
            parent = self._repository.get_parent(parent_id)
            entry = LedgerEntry(
                id=entry_id or uuid.uuid4().hex,
                parent_id=parent.id,
                parent_kind=parent.parent_kind,
                amount=value,
                kind=entry_kind,
                method=entry_method,
                status=EntryStatus.initial(parent.parent_kind, privileged),
                entry_date=business_date,
                description=description,
                created_at=utc_now(),
            )
            self._repository.append_ledger_entry(entry)
            balance = self._reconcile(parent.id)

        get_parent_logger(parent.id).info(
            f"Added {entry.kind.value} {entry.amount} via {entry.method.value} "
            f"({entry.status.value}), remaining={balance}"
        )
        return entry

    def set_status(self, entry_id: str, new_status: Union[str, EntryStatus]) -> LedgerEntry:
        """
        Approve or reject a pending entry.

        Raises:
            InvalidTransitionError: Entry is not pending, or new_status is
                not approved/rejected
            UnknownReferenceError: Unknown entry
            ValidationError: Unknown status value
        """
        status = EntryStatus.parse(new_status)
        if is_baseline_entry_id(entry_id):
            raise InvalidTransitionError("The baseline advance cannot change status", entry_id=entry_id)

        with self._repository.unit_of_work():
            entry = self._repository.get_entry(entry_id)
            self._repository.update_ledger_entry_status(entry_id, status)
            balance = self._reconcile(entry.parent_id)
            updated = self._repository.get_entry(entry_id)

        get_parent_logger(entry.parent_id).info(
            f"Entry {entry_id[:8]} {entry.status.value} -> {status.value}, remaining={balance}"
        )
        return updated

    def delete_entry(self, entry_id: str) -> int:
        """
        Delete a ledger entry (any status).

        Returns:
            The parent's recomputed remaining balance

        Raises:
            InvalidTransitionError: entry_id is the baseline advance
            UnknownReferenceError: Unknown entry
        """
        if is_baseline_entry_id(entry_id):
            raise InvalidTransitionError(
                "The baseline advance is stored on the order and cannot be deleted",
                entry_id=entry_id,
            )

        with self._repository.unit_of_work():
            entry = self._repository.get_entry(entry_id)
            self._repository.delete_ledger_entry(entry_id)
            balance = self._reconcile(entry.parent_id)

        get_parent_logger(entry.parent_id).info(
            f"Deleted {entry.status.value} entry {entry_id[:8]} ({entry.amount}), remaining={balance}"
        )
        return balance

    def recompute(self, parent_id: str) -> int:
        """Re-run reconciliation for a parent and persist the result."""
        with self._repository.unit_of_work():
            return self._reconcile(parent_id)

    def remaining_balance(self, parent_id: str) -> int:
        """Compute (without persisting) the remaining balance of a parent."""
        parent = self._repository.get_parent(parent_id)
        return reconcile(parent, self._repository.load_ledger(parent_id))

    def history(self, parent_id: str) -> List[LedgerEntry]:
        """
        Ledger history for display: baseline advance first, then stored
        entries newest entry_date first.

        Raises:
            UnknownReferenceError: Unknown parent
        """
        parent = self._repository.get_parent(parent_id)
        entries = sorted(
            self._repository.load_ledger(parent_id),
            key=lambda e: (e.entry_date, e.created_at or EPOCH),
            reverse=True,
        )
        if parent.baseline_advance > 0:
            return [parent.baseline_entry()] + entries
        return entries

    def pending_entries(self) -> List[LedgerEntry]:
        """Order entries awaiting approval, oldest first."""
        entries = self._repository.list_entries(EntryStatus.PENDING)
        return sorted(entries, key=lambda e: e.created_at or EPOCH)

    def _reconcile(self, parent_id: str) -> int:
        """Recompute from the full ledger and persist. Caller holds the unit of work."""
        parent = self._repository.get_parent(parent_id)
        balance = reconcile(parent, self._repository.load_ledger(parent_id))
        self._repository.update_parent_balance(parent_id, balance)
        logger.debug(f"Reconciled {parent_id[:8]}: remaining={balance}")
        return balance


def _parse_date(value: Optional[Union[str, date]]) -> date:
    if value is None or value == "":
        return utc_now().date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError("entry_date must be an ISO date (YYYY-MM-DD)", field="entry_date", value=value)
