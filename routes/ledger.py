"""
Ledger routes.

Handles:
- GET    /ledger/pending               - Order entries awaiting approval
- GET    /ledger/<parent_id>           - History and balance of a parent
- POST   /ledger/<parent_id>/entries   - Record a payment
- POST   /ledger/entries/<id>/status   - Approve or reject an entry
- DELETE /ledger/entries/<id>          - Delete an entry

Whether a new order entry starts approved depends on the X-Actor-Role
header, checked against PRIVILEGED_ROLES.
"""

from flask import Blueprint, abort, current_app

from logging_config import get_logger
from .helpers import is_privileged, json_body, sanitize_text


# Module logger
logger = get_logger(__name__)

ledger_bp = Blueprint("ledger", __name__)


@ledger_bp.route("/ledger/pending", methods=["GET"])
def pending():
    ledger_service = current_app.config["LEDGER_SERVICE"]
    entries = ledger_service.pending_entries()
    return {"entries": [e.to_dict() for e in entries], "count": len(entries)}


@ledger_bp.route("/ledger/<parent_id>", methods=["GET"])
def history(parent_id: str):
    """History (baseline advance first) and the recomputed balance."""
    ledger_service = current_app.config["LEDGER_SERVICE"]
    entries = ledger_service.history(parent_id)
    return {
        "parent_id": parent_id,
        "entries": [e.to_dict() for e in entries],
        "remaining_balance": ledger_service.remaining_balance(parent_id),
    }


@ledger_bp.route("/ledger/<parent_id>/entries", methods=["POST"])
def add_entry(parent_id: str):
    """
    Record a payment against an order or expense.

    Body:
        amount, kind, method, description, entry_date
    """
    data = json_body()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)
    ledger_service = current_app.config["LEDGER_SERVICE"]

    entry = ledger_service.add_entry(
        parent_id,
        amount=data.get("amount"),
        kind=data.get("kind", "payment"),
        method=data.get("method", "cash"),
        description=sanitize_text(data.get("description"), max_length=max_length),
        entry_date=data.get("entry_date"),
        privileged=is_privileged(),
    )
    return {
        "entry": entry.to_dict(),
        "remaining_balance": ledger_service.repository.get_parent(parent_id).remaining_balance,
    }, 201


@ledger_bp.route("/ledger/entries/<entry_id>/status", methods=["POST"])
def set_status(entry_id: str):
    """Approve or reject a pending entry. Privileged roles only."""
    if not is_privileged():
        abort(403, description="Only privileged roles may approve or reject entries")

    data = json_body()
    ledger_service = current_app.config["LEDGER_SERVICE"]
    entry = ledger_service.set_status(entry_id, data.get("status"))
    return {
        "entry": entry.to_dict(),
        "remaining_balance": ledger_service.repository.get_parent(entry.parent_id).remaining_balance,
    }


@ledger_bp.route("/ledger/entries/<entry_id>", methods=["DELETE"])
def delete_entry(entry_id: str):
    ledger_service = current_app.config["LEDGER_SERVICE"]
    balance = ledger_service.delete_entry(entry_id)
    logger.info(f"Entry {entry_id[:8]} deleted via API")
    return {"deleted": entry_id, "remaining_balance": balance}
