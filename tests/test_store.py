"""
Unit tests for the in-memory store.
"""

import pytest

from core.exceptions import UnknownReferenceError
from models.ledger import EntryStatus


class TestInMemoryStore:
    """Lookups, listings and unit of work."""

    def test_lists_by_parent_kind(self, store, order, expense):
        assert store.list_orders() == [order]
        assert store.list_expenses() == [expense]

    def test_unknown_lookups(self, store):
        with pytest.raises(UnknownReferenceError):
            store.get_parent("missing")
        with pytest.raises(UnknownReferenceError):
            store.get_entry("missing")
        with pytest.raises(UnknownReferenceError):
            store.delete_ledger_entry("missing")

    def test_list_entries_by_status(self, store, ledger_service, order):
        ledger_service.add_entry(order.id, 1000, privileged=True)
        ledger_service.add_entry(order.id, 2000, privileged=False)

        assert len(store.list_entries()) == 2
        assert [e.amount for e in store.list_entries(EntryStatus.PENDING)] == [2000]

    def test_unit_of_work_restores_on_error(self, store, order):
        with pytest.raises(ValueError):
            with store.unit_of_work():
                store.update_parent_balance(order.id, 0)
                raise ValueError("boom")

        assert store.get_parent(order.id).remaining_balance == 800_000

    def test_delete_parent_removes_its_entries(self, store, ledger_service, order, expense):
        ledger_service.add_entry(order.id, 1000, privileged=True)
        ledger_service.add_entry(order.id, 2000, privileged=False)
        ledger_service.add_entry(expense.id, 5000)

        assert store.delete_parent(order.id) == 2
        assert store.list_orders() == []
        assert [e.parent_id for e in store.list_entries()] == [expense.id]

    def test_delete_unknown_parent(self, store):
        with pytest.raises(UnknownReferenceError):
            store.delete_parent("missing")
