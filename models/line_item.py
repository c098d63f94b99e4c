"""
Line item and draft models.

These models represent an order while it is being assembled:
items are added, toggled and removed, then the draft is priced and cleared
once the order is saved.

Thread Safety:
    - LineItem and DraftState are frozen dataclasses
    - Draft operations return a new DraftState instead of mutating
    - Use to_dict()/from_dict() for session storage
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Any, List, Optional

from models.catalog import NO_SERVICE, PricingCategory


@dataclass(frozen=True)
class LineItem:
    """
    One priced unit within a draft order.

    The material unit price and width are copied from the catalog when the
    item is created and never re-read, so a saved draft reprices the same
    even after catalog prices change.
    """

    id: str
    """Unique item id."""

    material_key: str
    """Catalog key of the material (used for waste price lookup)."""

    category: PricingCategory
    """Pricing category copied from the material at creation."""

    width: float
    """Item width in metres (area/lightbox)."""

    height: float
    """Item height in metres (area/lightbox) or centimetres (linear)."""

    quantity: int
    """Number of pieces."""

    frozen_material_unit_price: float
    """Material unit price at the time the item was added."""

    frozen_material_width: float = 0.0
    """Roll width used for this item (area only)."""

    visible: bool = True
    """Invisible items stay in the draft but are excluded from pricing."""

    assembly_service_key: Optional[str] = None
    disassembly_service_key: Optional[str] = None

    name: str = ""
    """Display label for tables and receipts."""

    @property
    def service_keys(self) -> List[str]:
        """Attached service keys, skipping empty and 'none'."""
        return [
            key for key in (self.assembly_service_key, self.disassembly_service_key)
            if key and key != NO_SERVICE
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "id": self.id,
            "material_key": self.material_key,
            "category": self.category.value,
            "width": self.width,
            "height": self.height,
            "quantity": self.quantity,
            "frozen_material_unit_price": self.frozen_material_unit_price,
            "frozen_material_width": self.frozen_material_width,
            "visible": self.visible,
            "assembly_service_key": self.assembly_service_key,
            "disassembly_service_key": self.disassembly_service_key,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
        """Create from dictionary (e.g., from session)."""
        return cls(
            id=data["id"],
            material_key=data.get("material_key", ""),
            category=PricingCategory.parse(data.get("category", "area")),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            quantity=int(data.get("quantity", 0)),
            frozen_material_unit_price=float(data.get("frozen_material_unit_price", 0.0)),
            frozen_material_width=float(data.get("frozen_material_width", 0.0)),
            visible=data.get("visible", True),
            assembly_service_key=data.get("assembly_service_key"),
            disassembly_service_key=data.get("disassembly_service_key"),
            name=data.get("name", ""),
        )


@dataclass(frozen=True)
class DraftState:
    """
    An order being assembled.

    Items are kept in insertion order, which is also the order used in
    output tables. Use services.draft_service to change a draft.
    """

    items: tuple[LineItem, ...] = ()
    discount_percent: float = 0.0

    @property
    def visible_items(self) -> List[LineItem]:
        """Items included in pricing."""
        return [item for item in self.items if item.visible]

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> Optional[LineItem]:
        """Find an item by id, returning None if absent."""
        return next((item for item in self.items if item.id == item_id), None)

    def with_items(self, items: List[LineItem]) -> "DraftState":
        return replace(self, items=tuple(items))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "items": [item.to_dict() for item in self.items],
            "discount_percent": self.discount_percent,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DraftState":
        """Create from dictionary (e.g., from session). None yields an empty draft."""
        if not data:
            return cls()
        return cls(
            items=tuple(LineItem.from_dict(item) for item in data.get("items", [])),
            discount_percent=float(data.get("discount_percent", 0.0)),
        )
