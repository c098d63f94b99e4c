"""
Order and expense creation.

Turns a priced draft into a saved Order, and records expenses. Both start
with remaining_balance = total_amount - baseline_advance; from then on the
ledger service owns the balance.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Any, Optional, Union

from core.exceptions import UnknownReferenceError, ValidationError
from models.catalog import Catalog
from models.ledger import PaymentMethod, utc_now
from models.line_item import DraftState
from models.order import Expense, Order
from modules.numeric import parse_whole
from services.pricing_engine import price
from services.reconciliation import reconcile
from services.store import LedgerRepository
from logging_config import get_logger, get_parent_logger


# Module logger
logger = get_logger(__name__)


class OrderService:
    """Creates orders from drafts and records expenses."""

    def __init__(self, repository: LedgerRepository):
        self._repository = repository

    def create_order(
        self,
        draft: DraftState,
        catalog: Catalog,
        customer_name: str,
        payment_method: Union[str, PaymentMethod],
        baseline_advance: Any = 0,
        phone_number: str = "",
        order_id: Optional[str] = None,
    ) -> Order:
        """
        Price the draft and save it as an order.

        The order total is the breakdown's final cost rounded to whole
        currency units, frozen at this moment.

        Raises:
            ValidationError: Empty draft, missing customer name, bad payment
                method, or an advance that is negative or exceeds the total
            UnknownReferenceError: A draft item references a key missing
                from the catalog
        """
        if not draft.visible_items:
            raise ValidationError("Cannot create an order from an empty draft", field="items")
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required", field="customer_name")

        method = PaymentMethod.parse(payment_method)
        breakdown = price(draft.items, catalog, draft.discount_percent)
        total = breakdown.final_cost_whole
        advance = _validate_advance(baseline_advance, total)

        order = Order(
            id=order_id or uuid.uuid4().hex,
            customer_name=customer_name.strip(),
            total_amount=total,
            payment_method=method,
            baseline_advance=advance,
            created_at=utc_now(),
            phone_number=phone_number.strip(),
            breakdown=breakdown,
        )
        order = order.with_balance(reconcile(order, []))

        with self._repository.unit_of_work():
            self._repository.save_order(order)

        get_parent_logger(order.id).info(
            f"Order created for {order.customer_name}: total={total}, "
            f"advance={advance} ({method.value}), items={len(draft.visible_items)}"
        )
        return order

    def create_expense(
        self,
        name: str,
        total_amount: Any,
        payment_method: Union[str, PaymentMethod],
        baseline_advance: Any = 0,
        expense_id: Optional[str] = None,
    ) -> Expense:
        """
        Record a business expense.

        Raises:
            ValidationError: Missing name, non-positive total, bad payment
                method, or an advance that is negative or exceeds the total
        """
        if not name or not name.strip():
            raise ValidationError("Expense name is required", field="name")

        total = parse_whole(total_amount, "total_amount")
        method = PaymentMethod.parse(payment_method)
        advance = _validate_advance(baseline_advance, total)

        expense = Expense(
            id=expense_id or uuid.uuid4().hex,
            name=name.strip(),
            total_amount=total,
            payment_method=method,
            baseline_advance=advance,
            created_at=utc_now(),
        )
        expense = expense.with_balance(reconcile(expense, []))

        with self._repository.unit_of_work():
            self._repository.save_expense(expense)

        get_parent_logger(expense.id).info(
            f"Expense '{expense.name}' recorded: total={total}, advance={advance} ({method.value})"
        )
        return expense

    # =========================================================================
    # EDITS
    # =========================================================================

    def update_order(
        self,
        order_id: str,
        customer_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        total_amount: Any = None,
        baseline_advance: Any = None,
        payment_method: Optional[Union[str, PaymentMethod]] = None,
    ) -> Order:
        """
        Edit a saved order and recompute its balance from the full ledger.

        Fields left as None keep their current value. The advance is checked
        against the (possibly new) total.

        Raises:
            ValidationError: Blank customer name, non-positive total, bad
                payment method, or an advance outside [0, total]
            UnknownReferenceError: No order has this id
        """
        changes = {}
        if customer_name is not None:
            if not customer_name.strip():
                raise ValidationError("Customer name is required", field="customer_name")
            changes["customer_name"] = customer_name.strip()
        if phone_number is not None:
            changes["phone_number"] = phone_number.strip()
        return self._update_parent(order_id, Order, "order", total_amount, baseline_advance, payment_method, changes)

    def update_expense(
        self,
        expense_id: str,
        name: Optional[str] = None,
        total_amount: Any = None,
        baseline_advance: Any = None,
        payment_method: Optional[Union[str, PaymentMethod]] = None,
    ) -> Expense:
        """
        Edit an expense and recompute its balance.

        Raises:
            ValidationError: Blank name, non-positive total, bad payment
                method, or an advance outside [0, total]
            UnknownReferenceError: No expense has this id
        """
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Expense name is required", field="name")
            changes["name"] = name.strip()
        return self._update_parent(expense_id, Expense, "expense", total_amount, baseline_advance, payment_method, changes)

    def delete_order(self, order_id: str) -> int:
        """
        Delete an order and its ledger entries.

        Returns:
            Number of ledger entries removed
        """
        with self._repository.unit_of_work():
            self._get_parent(order_id, Order, "order")
            removed = self._repository.delete_parent(order_id)
        get_parent_logger(order_id).info(f"Order deleted with {removed} ledger entries")
        return removed

    def delete_expense(self, expense_id: str) -> int:
        with self._repository.unit_of_work():
            self._get_parent(expense_id, Expense, "expense")
            removed = self._repository.delete_parent(expense_id)
        get_parent_logger(expense_id).info(f"Expense deleted with {removed} ledger entries")
        return removed

    def clear_orders(self) -> int:
        """
        Delete every order and its ledger entries. Expenses are kept.

        Returns:
            Number of orders removed
        """
        with self._repository.unit_of_work():
            orders = self._repository.list_orders()
            for order in orders:
                self._repository.delete_parent(order.id)
        logger.info(f"Cleared {len(orders)} orders")
        return len(orders)

    def _get_parent(self, parent_id: str, parent_type: type, label: str):
        parent = self._repository.get_parent(parent_id)
        if not isinstance(parent, parent_type):
            raise UnknownReferenceError(label, parent_id)
        return parent

    def _update_parent(self, parent_id, parent_type, label, total_amount, baseline_advance, payment_method, changes):
        with self._repository.unit_of_work():
            parent = self._get_parent(parent_id, parent_type, label)

            total = parent.total_amount
            if total_amount is not None:
                total = parse_whole(total_amount, "total_amount")
            advance = parent.baseline_advance if baseline_advance is None else baseline_advance
            changes["total_amount"] = total
            changes["baseline_advance"] = _validate_advance(advance, total)
            if payment_method is not None:
                changes["payment_method"] = PaymentMethod.parse(payment_method)

            updated = replace(parent, **changes)
            if parent_type is Order:
                self._repository.save_order(updated)
            else:
                self._repository.save_expense(updated)

            balance = reconcile(updated, self._repository.load_ledger(parent_id))
            self._repository.update_parent_balance(parent_id, balance)
            result = self._repository.get_parent(parent_id)

        get_parent_logger(parent_id).info(
            f"{label.capitalize()} updated: total={result.total_amount}, "
            f"advance={result.baseline_advance}, remaining={balance}"
        )
        return result


def _validate_advance(value: Any, total: int) -> int:
    if value in (None, ""):
        return 0
    advance = parse_whole(value, "baseline_advance", allow_zero=True)
    if advance > total:
        raise ValidationError(
            f"Advance {advance} exceeds the total {total}",
            field="baseline_advance",
            value=value,
            details={"total_amount": total},
        )
    return advance
