"""
Draft editing operations.

Every function takes a DraftState and returns a new one; nothing is
mutated in place, so routes can store the result back in the session
only after the whole operation succeeded.

Validation happens here, not in the pricing engine: negative, zero or
non-numeric dimensions never reach price().
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Any, Optional

from core.exceptions import UnknownReferenceError, ValidationError
from models.catalog import NO_SERVICE, Catalog, Material, PricingCategory
from models.line_item import DraftState, LineItem
from modules.numeric import parse_number, parse_positive, parse_whole
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

# Tolerance when comparing metre widths typed by users against roll widths
WIDTH_TOLERANCE = 1e-9


def add_line_item(
    draft: DraftState,
    catalog: Catalog,
    material_key: str,
    width: Any = None,
    height: Any = None,
    quantity: Any = 1,
    material_width: Any = None,
    assembly_service_key: Optional[str] = None,
    disassembly_service_key: Optional[str] = None,
    name: Optional[str] = None,
    item_id: Optional[str] = None,
) -> DraftState:
    """
    Append a visible line item to the draft.

    The material's category, unit price and roll width are copied onto the
    item here and never re-read from the catalog.

    Args:
        draft: Current draft
        catalog: Live catalog snapshot (only existing keys should be offered)
        material_key: Catalog key of the material
        width: Item width in metres (area/lightbox)
        height: Item height in metres, or centimetres for linear items
        quantity: Number of pieces (positive whole number)
        material_width: Roll width for width-constrained materials.
            Defaults to the narrowest roll that fits the item.
        assembly_service_key: Optional service key ("none" = no service)
        disassembly_service_key: Optional service key ("none" = no service)
        name: Optional display label
        item_id: Optional id (generated if not provided)

    Returns:
        New DraftState with the item appended

    Raises:
        ValidationError: Bad dimensions/quantity, width not allowed for the
            material, or service not applicable to the material
        UnknownReferenceError: Unknown material or service key
    """
    material = catalog.get_material(material_key)
    qty = parse_whole(quantity, "quantity")

    item_width = 0.0
    item_height = 0.0
    frozen_width = 0.0

    if material.category in (PricingCategory.AREA, PricingCategory.LIGHTBOX):
        item_width = parse_positive(width, "width")
        item_height = parse_positive(height, "height")
        if material.category is PricingCategory.AREA:
            frozen_width = _resolve_material_width(material, item_width, material_width)

    elif material.category is PricingCategory.LINEAR:
        item_height = parse_positive(height, "height")
        if width not in (None, ""):
            item_width = parse_positive(width, "width")

    else:
        # Per-unit pricing ignores dimensions, but supplied ones must still be valid
        for field_name, value in (("width", width), ("height", height)):
            if value not in (None, ""):
                parse_positive(value, field_name)

    services = []
    for role, key in (("assembly", assembly_service_key), ("disassembly", disassembly_service_key)):
        if not key or key == NO_SERVICE:
            services.append(None)
            continue
        service = catalog.get_service(key)
        if not service.applies_to(material.key):
            raise ValidationError(
                f"Service '{service.display_name}' cannot be used with {material.display_name}",
                field=f"{role}_service_key",
                value=key,
            )
        services.append(service.key)

    item = LineItem(
        id=item_id or uuid.uuid4().hex,
        material_key=material.key,
        category=material.category,
        width=item_width,
        height=item_height,
        quantity=qty,
        frozen_material_unit_price=material.unit_price,
        frozen_material_width=frozen_width,
        visible=True,
        assembly_service_key=services[0],
        disassembly_service_key=services[1],
        name=name or _default_name(material, item_width, item_height, frozen_width),
    )

    logger.debug(
        f"Added item {item.id[:8]}: {material.key} ({material.category.value}) "
        f"{item_width}x{item_height} x{qty} @ {material.unit_price}"
    )
    return draft.with_items(list(draft.items) + [item])


def toggle_visibility(draft: DraftState, item_id: str) -> DraftState:
    """
    Flip an item's visible flag without removing it.

    Raises:
        UnknownReferenceError: If no item has this id
    """
    _require_item(draft, item_id)
    items = [
        replace(item, visible=not item.visible) if item.id == item_id else item
        for item in draft.items
    ]
    return draft.with_items(items)


def remove_line_item(draft: DraftState, item_id: str) -> DraftState:
    """
    Delete an item by id.

    Raises:
        UnknownReferenceError: If no item has this id
    """
    _require_item(draft, item_id)
    return draft.with_items([item for item in draft.items if item.id != item_id])


def set_discount(draft: DraftState, percent: Any) -> DraftState:
    """
    Set the order-level discount.

    Raises:
        ValidationError: If percent is not a number in [0, 100]
    """
    value = parse_number(percent, "discount_percent")
    if not 0 <= value <= 100:
        raise ValidationError(
            "Discount must be between 0 and 100 percent",
            field="discount_percent",
            value=percent,
        )
    return DraftState(items=draft.items, discount_percent=value)


def clear_draft() -> DraftState:
    """Return an empty draft (used once the order has been saved)."""
    return DraftState()


def _require_item(draft: DraftState, item_id: str) -> LineItem:
    item = draft.find_item(item_id)
    if item is None:
        raise UnknownReferenceError("line item", item_id)
    return item


def _resolve_material_width(material: Material, item_width: float, material_width: Any) -> float:
    """
    Pick the roll width for an area item.

    Unconstrained materials consume exactly the item width.
    """
    if not material.is_width_constrained:
        if material_width in (None, ""):
            return item_width
        roll = parse_positive(material_width, "material_width")
    elif material_width in (None, ""):
        fitting = sorted(w for w in material.width_variants if w + WIDTH_TOLERANCE >= item_width)
        if not fitting:
            raise ValidationError(
                f"Width {item_width} m exceeds the widest {material.display_name} roll "
                f"({max(material.width_variants)} m)",
                field="width",
                value=item_width,
            )
        return fitting[0]
    else:
        roll = parse_positive(material_width, "material_width")
        if not any(abs(roll - w) <= WIDTH_TOLERANCE for w in material.width_variants):
            raise ValidationError(
                f"{material.display_name} is not available in width {roll} m",
                field="material_width",
                value=material_width,
                details={"allowed": list(material.width_variants)},
            )

    if item_width > roll + WIDTH_TOLERANCE:
        raise ValidationError(
            f"Width {item_width} m exceeds the selected material width {roll} m",
            field="width",
            value=item_width,
        )
    return roll


def _default_name(material: Material, width: float, height: float, roll_width: float) -> str:
    if material.category is PricingCategory.AREA:
        return f"{material.display_name} {roll_width:g} m: {width:g}x{height:g} m"
    if material.category is PricingCategory.LIGHTBOX:
        return f"{material.display_name}: {width:g}x{height:g} m"
    if material.category is PricingCategory.LINEAR:
        return f"{material.display_name}: {height:g} cm"
    return material.display_name
