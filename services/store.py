"""
In-process persistence for orders, expenses and ledger entries.

The pricing and reconciliation core never performs I/O. It is handed data
by a LedgerRepository and returns results for the repository to persist.
InMemoryStore is the repository used by the Flask app and the tests; a
database-backed repository only needs to implement the same methods.

Thread Safety:
    - Uses threading.RLock for all operations
    - unit_of_work() holds the lock for a whole mutate-and-reconcile
      sequence and restores the previous state if any step raises, so a
      ledger change is never left behind with a stale balance

Usage:
    store = InMemoryStore()
    store.save_order(order)

    with store.unit_of_work():
        store.append_ledger_entry(entry)
        store.update_parent_balance(order.id, reconcile(order, store.load_ledger(order.id)))
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Protocol, Union

from core.exceptions import UnknownReferenceError
from models.ledger import EntryStatus, LedgerEntry
from models.order import Expense, Order
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

Parent = Union[Order, Expense]


class LedgerRepository(Protocol):
    """Persistence contract consumed by the ledger and order services."""

    def load_ledger(self, parent_id: str) -> List[LedgerEntry]: ...

    def append_ledger_entry(self, entry: LedgerEntry) -> None: ...

    def update_ledger_entry_status(self, entry_id: str, status: EntryStatus) -> None: ...

    def delete_ledger_entry(self, entry_id: str) -> None: ...

    def update_parent_balance(self, parent_id: str, remaining_balance: int) -> None: ...

    def get_parent(self, parent_id: str) -> Parent: ...

    def get_entry(self, entry_id: str) -> LedgerEntry: ...

    def save_order(self, order: Order) -> None: ...

    def save_expense(self, expense: Expense) -> None: ...

    def delete_parent(self, parent_id: str) -> int: ...

    def list_orders(self) -> List[Order]: ...

    def list_expenses(self) -> List[Expense]: ...

    def list_entries(self, status: Optional[EntryStatus] = None) -> List[LedgerEntry]: ...

    def unit_of_work(self): ...


class InMemoryStore:
    """
    Thread-safe, dictionary-backed LedgerRepository.

    Entries are kept in insertion order per parent.
    """

    def __init__(self):
        """Initialize empty store."""
        self._parents: Dict[str, Parent] = {}
        self._entries: Dict[str, LedgerEntry] = {}
        self._lock = threading.RLock()

    # =========================================================================
    # UNIT OF WORK
    # =========================================================================

    @contextmanager
    def unit_of_work(self) -> Iterator["InMemoryStore"]:
        """
        Run several writes as one all-or-nothing step.

        The stored values are frozen dataclasses, so copying the two dicts
        is enough to restore the previous state.
        """
        with self._lock:
            parents_before = dict(self._parents)
            entries_before = dict(self._entries)
            try:
                yield self
            except Exception:
                self._parents = parents_before
                self._entries = entries_before
                logger.warning("Unit of work failed, store state restored")
                raise

    # =========================================================================
    # PARENTS
    # =========================================================================

    def save_order(self, order: Order) -> None:
        with self._lock:
            self._parents[order.id] = order
            logger.debug(f"Saved order {order.id[:8]}")

    def save_expense(self, expense: Expense) -> None:
        with self._lock:
            self._parents[expense.id] = expense
            logger.debug(f"Saved expense {expense.id[:8]}")

    def get_parent(self, parent_id: str) -> Parent:
        """
        Raises:
            UnknownReferenceError: If no order or expense has this id
        """
        with self._lock:
            parent = self._parents.get(parent_id)
        if parent is None:
            raise UnknownReferenceError("order or expense", parent_id)
        return parent

    def list_orders(self) -> List[Order]:
        with self._lock:
            return [p for p in self._parents.values() if isinstance(p, Order)]

    def list_expenses(self) -> List[Expense]:
        with self._lock:
            return [p for p in self._parents.values() if isinstance(p, Expense)]

    def update_parent_balance(self, parent_id: str, remaining_balance: int) -> None:
        with self._lock:
            parent = self.get_parent(parent_id)
            self._parents[parent_id] = parent.with_balance(remaining_balance)

    # =========================================================================
    # LEDGER ENTRIES
    # =========================================================================

    def load_ledger(self, parent_id: str) -> List[LedgerEntry]:
        """Current entries of a parent, in insertion order."""
        with self._lock:
            return [e for e in self._entries.values() if e.parent_id == parent_id]

    def list_entries(self, status: Optional[EntryStatus] = None) -> List[LedgerEntry]:
        with self._lock:
            return [e for e in self._entries.values() if status is None or e.status is status]

    def get_entry(self, entry_id: str) -> LedgerEntry:
        """
        Raises:
            UnknownReferenceError: If no entry has this id
        """
        with self._lock:
            entry = self._entries.get(entry_id)
        if entry is None:
            raise UnknownReferenceError("ledger entry", entry_id)
        return entry

    def append_ledger_entry(self, entry: LedgerEntry) -> None:
        with self._lock:
            self._entries[entry.id] = entry

    def update_ledger_entry_status(self, entry_id: str, status: EntryStatus) -> None:
        with self._lock:
            entry = self.get_entry(entry_id)
            self._entries[entry_id] = entry.with_status(status)

    def delete_ledger_entry(self, entry_id: str) -> None:
        with self._lock:
            self.get_entry(entry_id)
            del self._entries[entry_id]

    def delete_parent(self, parent_id: str) -> int:
        """
        Remove an order or expense together with its ledger entries.

        Returns:
            Number of ledger entries removed

        Raises:
            UnknownReferenceError: If no order or expense has this id
        """
        with self._lock:
            self.get_parent(parent_id)
            entry_ids = [e.id for e in self._entries.values() if e.parent_id == parent_id]
            for entry_id in entry_ids:
                del self._entries[entry_id]
            del self._parents[parent_id]
            logger.info(f"Deleted {parent_id[:8]} with {len(entry_ids)} ledger entries")
            return len(entry_ids)
