"""
Draft routes.

The draft lives in the Flask session as DraftState.to_dict(). Each handler
loads it, applies one draft_service operation and stores the result back
only if the operation succeeded.

Handles:
- GET    /draft                     - Current draft
- POST   /draft/items               - Add a line item
- POST   /draft/items/<id>/toggle   - Show/hide an item
- DELETE /draft/items/<id>          - Remove an item
- PUT    /draft/discount            - Set the discount percentage
- DELETE /draft                     - Clear the draft
- GET    /draft/price               - Price the visible items
"""

from flask import Blueprint, current_app

from core.exceptions import ValidationError
from services import draft_service
from services.pricing_engine import price
from logging_config import get_logger
from .helpers import json_body, load_draft, sanitize_text, save_draft


# Module logger
logger = get_logger(__name__)

drafts_bp = Blueprint("drafts", __name__)


def _draft_response(draft, status_code: int = 200):
    return {"draft": draft.to_dict(), "item_count": len(draft.items)}, status_code


@drafts_bp.route("/draft", methods=["GET"])
def get_draft():
    return _draft_response(load_draft())


@drafts_bp.route("/draft/items", methods=["POST"])
def add_item():
    """
    Add a line item.

    Body:
        material_key, width, height, quantity, material_width,
        assembly_service_key, disassembly_service_key, name
    """
    data = json_body()
    draft = load_draft()

    max_items = current_app.config.get("MAX_LINE_ITEMS", 50)
    if len(draft.items) >= max_items:
        raise ValidationError(f"A draft can hold at most {max_items} items", field="items")

    catalog = current_app.config["CATALOG_SERVICE"].snapshot()
    max_length = current_app.config.get("MAX_TEXT_LENGTH", 200)

    draft = draft_service.add_line_item(
        draft,
        catalog,
        material_key=str(data.get("material_key", "")),
        width=data.get("width"),
        height=data.get("height"),
        quantity=data.get("quantity", 1),
        material_width=data.get("material_width"),
        assembly_service_key=data.get("assembly_service_key"),
        disassembly_service_key=data.get("disassembly_service_key"),
        name=sanitize_text(data.get("name"), max_length=max_length) or None,
    )
    save_draft(draft)

    item = draft.items[-1]
    logger.info(f"Draft item added: {item.material_key} x{item.quantity}")
    return {"item": item.to_dict(), "draft": draft.to_dict(), "item_count": len(draft.items)}, 201


@drafts_bp.route("/draft/items/<item_id>/toggle", methods=["POST"])
def toggle_item(item_id: str):
    draft = draft_service.toggle_visibility(load_draft(), item_id)
    save_draft(draft)
    return _draft_response(draft)


@drafts_bp.route("/draft/items/<item_id>", methods=["DELETE"])
def remove_item(item_id: str):
    draft = draft_service.remove_line_item(load_draft(), item_id)
    save_draft(draft)
    return _draft_response(draft)


@drafts_bp.route("/draft/discount", methods=["PUT"])
def set_discount():
    data = json_body()
    draft = draft_service.set_discount(load_draft(), data.get("discount_percent"))
    save_draft(draft)
    return _draft_response(draft)


@drafts_bp.route("/draft", methods=["DELETE"])
def clear():
    draft = draft_service.clear_draft()
    save_draft(draft)
    return _draft_response(draft)


@drafts_bp.route("/draft/price", methods=["GET"])
def price_draft():
    """
    Price the visible items of the draft.

    Returns both the full-precision breakdown and the rounded display values.
    """
    draft = load_draft()
    catalog = current_app.config["CATALOG_SERVICE"].snapshot()
    breakdown = price(draft.items, catalog, draft.discount_percent)
    return {
        "catalog_version": catalog.version,
        "breakdown": breakdown.to_dict(),
        "display": breakdown.to_display_dict(),
    }
