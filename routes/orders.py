"""
Order and expense routes.

Handles:
- POST   /orders          - Price the session draft and save it as an order
- GET    /orders          - All orders with their current balances
- DELETE /orders          - Delete every order (privileged)
- GET    /orders/<id>     - Order with its current balance
- PUT    /orders/<id>     - Edit an order and recompute its balance
- DELETE /orders/<id>     - Delete an order and its ledger entries
- POST   /expenses        - Record an expense
- GET    /expenses        - All expenses
- GET    /expenses/<id>   - Expense with its current balance
- PUT    /expenses/<id>   - Edit an expense and recompute its balance
- DELETE /expenses/<id>   - Delete an expense and its ledger entries
"""

from flask import Blueprint, abort, current_app

from core.exceptions import UnknownReferenceError
from models.order import Expense, Order
from services import draft_service
from logging_config import get_logger
from .helpers import is_privileged, json_body, load_draft, sanitize_text, save_draft


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__)


@orders_bp.route("/orders", methods=["POST"])
def create_order():
    """
    Create an order from the session draft.

    Body:
        customer_name, phone_number, payment_method, baseline_advance

    The draft is cleared only after the order has been saved.
    """
    data = json_body()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)
    order_service = current_app.config["ORDER_SERVICE"]
    catalog = current_app.config["CATALOG_SERVICE"].snapshot()

    order = order_service.create_order(
        load_draft(),
        catalog,
        customer_name=sanitize_text(data.get("customer_name"), max_length=max_length),
        payment_method=data.get("payment_method", "cash"),
        baseline_advance=data.get("baseline_advance", 0),
        phone_number=sanitize_text(data.get("phone_number"), max_length=max_length),
    )
    save_draft(draft_service.clear_draft())

    logger.info(f"Order {order.id[:8]} saved from draft, total={order.total_amount}")
    return {"order": order.to_dict()}, 201


@orders_bp.route("/orders", methods=["GET"])
def list_orders():
    orders = sorted(current_app.config["STORE"].list_orders(), key=lambda o: o.created_at, reverse=True)
    return {"orders": [o.to_dict() for o in orders]}


@orders_bp.route("/orders", methods=["DELETE"])
def clear_orders():
    """Delete all orders with their ledgers. Expenses are kept."""
    if not is_privileged():
        abort(403, description="Only privileged roles may clear all orders")
    removed = current_app.config["ORDER_SERVICE"].clear_orders()
    return {"deleted": removed}


@orders_bp.route("/orders/<order_id>", methods=["GET"])
def get_order(order_id: str):
    parent = _get_parent(order_id, Order, "order")
    return {"order": parent.to_dict()}


@orders_bp.route("/orders/<order_id>", methods=["PUT"])
def update_order(order_id: str):
    """
    Edit an order.

    Body (all optional):
        customer_name, phone_number, total_amount, baseline_advance, payment_method

    The advance must stay within [0, total]; the remaining balance is
    recomputed from the whole ledger.
    """
    data = json_body()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)

    order = current_app.config["ORDER_SERVICE"].update_order(
        order_id,
        customer_name=_optional_text(data, "customer_name", max_length),
        phone_number=_optional_text(data, "phone_number", max_length),
        total_amount=data.get("total_amount"),
        baseline_advance=data.get("baseline_advance"),
        payment_method=data.get("payment_method"),
    )
    return {"order": order.to_dict()}


@orders_bp.route("/orders/<order_id>", methods=["DELETE"])
def delete_order(order_id: str):
    removed = current_app.config["ORDER_SERVICE"].delete_order(order_id)
    return {"deleted": order_id, "entries_removed": removed}


@orders_bp.route("/expenses", methods=["POST"])
def create_expense():
    """
    Record an expense.

    Body:
        name, total_amount, payment_method, baseline_advance
    """
    data = json_body()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)
    order_service = current_app.config["ORDER_SERVICE"]

    expense = order_service.create_expense(
        name=sanitize_text(data.get("name"), max_length=max_length),
        total_amount=data.get("total_amount"),
        payment_method=data.get("payment_method", "cash"),
        baseline_advance=data.get("baseline_advance", 0),
    )
    return {"expense": expense.to_dict()}, 201


@orders_bp.route("/expenses", methods=["GET"])
def list_expenses():
    expenses = sorted(current_app.config["STORE"].list_expenses(), key=lambda e: e.created_at, reverse=True)
    return {"expenses": [e.to_dict() for e in expenses]}


@orders_bp.route("/expenses/<expense_id>", methods=["GET"])
def get_expense(expense_id: str):
    parent = _get_parent(expense_id, Expense, "expense")
    return {"expense": parent.to_dict()}


@orders_bp.route("/expenses/<expense_id>", methods=["PUT"])
def update_expense(expense_id: str):
    """
    Edit an expense.

    Body (all optional):
        name, total_amount, baseline_advance, payment_method
    """
    data = json_body()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)

    expense = current_app.config["ORDER_SERVICE"].update_expense(
        expense_id,
        name=_optional_text(data, "name", max_length),
        total_amount=data.get("total_amount"),
        baseline_advance=data.get("baseline_advance"),
        payment_method=data.get("payment_method"),
    )
    return {"expense": expense.to_dict()}


@orders_bp.route("/expenses/<expense_id>", methods=["DELETE"])
def delete_expense(expense_id: str):
    removed = current_app.config["ORDER_SERVICE"].delete_expense(expense_id)
    return {"deleted": expense_id, "entries_removed": removed}


def _get_parent(parent_id: str, parent_type: type, label: str):
    """Look up a parent and check it is the requested kind."""
    parent = current_app.config["STORE"].get_parent(parent_id)
    if not isinstance(parent, parent_type):
        raise UnknownReferenceError(label, parent_id)
    return parent


def _optional_text(data, field: str, max_length: int):
    # Absent keys keep the stored value; present ones are sanitized
    if field not in data or data[field] is None:
        return None
    return sanitize_text(data[field], max_length=max_length)
