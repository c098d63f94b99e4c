"""
Balance reconciliation for orders and expenses.

The remaining balance is ALWAYS recomputed from the full current entry set:

    paid      = baseline_advance + sum(amount of entries that count)
    remaining = max(0, total_amount - paid)

An order entry counts only when approved; an expense entry always counts.
Because nothing is adjusted incrementally, any sequence of add/approve/
delete operations that ends in the same entry set ends in the same
balance, and running reconcile() twice changes nothing.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, List

from models.ledger import LedgerEntry, PaymentMethod


def paid_total(parent, entries: Iterable[LedgerEntry]) -> int:
    """
    Baseline advance plus every entry that counts toward the balance.

    Entries belonging to other parents are ignored.
    """
    counted = sum(
        entry.amount
        for entry in entries
        if entry.parent_id == parent.id and entry.counts_toward_balance and not entry.is_baseline
    )
    return parent.baseline_advance + counted


def reconcile(parent, entries: Iterable[LedgerEntry]) -> int:
    """
    Compute the remaining balance of an order or expense.

    Args:
        parent: Order or Expense (needs id, total_amount, baseline_advance)
        entries: Full current ledger of the parent

    Returns:
        Remaining balance, never negative
    """
    return max(0, parent.total_amount - paid_total(parent, entries))


def payment_totals_by_method(parents: Iterable, entries: Iterable[LedgerEntry]) -> Dict[str, Dict[str, int]]:
    """
    Sum money received per payment method.

    Each parent's baseline advance is counted under the parent's payment
    method; ledger entries are counted under their own method, and only
    when they count toward the balance.

    Returns:
        {method: {"amount": int, "count": int}} for every PaymentMethod
    """
    totals: Dict[str, Dict[str, int]] = OrderedDict(
        (method.value, {"amount": 0, "count": 0}) for method in PaymentMethod
    )

    parent_ids = set()
    for parent in parents:
        parent_ids.add(parent.id)
        if parent.baseline_advance > 0:
            bucket = totals[parent.payment_method.value]
            bucket["amount"] += parent.baseline_advance
            bucket["count"] += 1

    for entry in entries:
        if entry.parent_id in parent_ids and entry.counts_toward_balance and not entry.is_baseline:
            bucket = totals[entry.method.value]
            bucket["amount"] += entry.amount
            bucket["count"] += 1

    return totals


def outstanding_total(parents: Iterable, ledgers: Dict[str, List[LedgerEntry]]) -> int:
    """Sum of remaining balances, each recomputed from its ledger."""
    return sum(reconcile(parent, ledgers.get(parent.id, [])) for parent in parents)
