"""
Unit tests for balance reconciliation.
"""

import itertools
from datetime import date

import pytest

from models.ledger import EntryKind, EntryStatus, LedgerEntry, ParentKind, PaymentMethod
from services.reconciliation import (
    outstanding_total,
    paid_total,
    payment_totals_by_method,
    reconcile,
)


def _entry(entry_id, amount, status, parent_id="order-1", method=PaymentMethod.CASH,
           parent_kind=ParentKind.ORDER):
    return LedgerEntry(
        id=entry_id,
        parent_id=parent_id,
        parent_kind=parent_kind,
        amount=amount,
        kind=EntryKind.PAYMENT,
        method=method,
        status=status,
        entry_date=date(2026, 10, 1),
    )


# Fixtures

@pytest.fixture
def entries():
    return [
        _entry("approved", 300_000, EntryStatus.APPROVED),
        _entry("pending", 400_000, EntryStatus.PENDING, method=PaymentMethod.DIGITAL_WALLET),
        _entry("rejected", 50_000, EntryStatus.REJECTED),
    ]


class TestReconcile:
    """reconcile() and paid_total()."""

    def test_only_approved_entries_count(self, order, entries):
        assert paid_total(order, entries) == 500_000
        assert reconcile(order, entries) == 500_000

    def test_no_entries_leaves_total_minus_advance(self, order):
        assert reconcile(order, []) == 800_000

    def test_overpayment_floors_at_zero(self, order):
        entries = [_entry("big", 5_000_000, EntryStatus.APPROVED)]

        assert reconcile(order, entries) == 0

    def test_entries_of_other_parents_are_ignored(self, order):
        entries = [_entry("other", 300_000, EntryStatus.APPROVED, parent_id="order-2")]

        assert reconcile(order, entries) == 800_000

    def test_idempotent(self, order, entries):
        assert reconcile(order, entries) == reconcile(order, entries)

    def test_order_independent(self, order, entries):
        results = {reconcile(order, list(p)) for p in itertools.permutations(entries)}

        assert results == {500_000}

    def test_expense_entries_always_count(self, expense):
        entries = [
            _entry("e1", 100_000, EntryStatus.APPROVED, parent_id=expense.id,
                   parent_kind=ParentKind.EXPENSE),
            _entry("e2", 200_000, EntryStatus.PENDING, parent_id=expense.id,
                   parent_kind=ParentKind.EXPENSE),
        ]

        assert reconcile(expense, entries) == 300_000


class TestReporting:
    """Totals for reporting consumers."""

    def test_payment_totals_by_method(self, order, entries):
        totals = payment_totals_by_method([order], entries)

        assert list(totals) == ["cash", "digital_wallet", "bank_transfer"]
        assert totals["cash"] == {"amount": 500_000, "count": 2}
        assert totals["digital_wallet"] == {"amount": 0, "count": 0}

    def test_outstanding_total(self, order, expense, entries):
        ledgers = {order.id: entries}

        assert outstanding_total([order, expense], ledgers) == 500_000 + 600_000
