"""
Cost breakdown model.

The result of pricing a draft: aggregate areas, costs, discount and the
final amount. Produced by services.pricing_engine.price().
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Any

from modules.numeric import round_area, to_whole_units


@dataclass(frozen=True)
class CostBreakdown:
    """
    Aggregated pricing result for the visible items of a draft.

    Invariants:
        total_cost = material_cost + waste_cost + service_cost
        discount_amount = total_cost * discount_percent / 100
        final_cost = total_cost - discount_amount

    All values keep full float precision. Use to_display_dict() for
    rounded output; never aggregate rounded values.
    """

    total_print_area: float = 0.0
    """Sum of printed area in m²."""

    total_material_used: float = 0.0
    """Sum of roll material consumed in m²."""

    total_waste: float = 0.0
    """Sum of per-item waste area in m²."""

    waste_percentage: float = 0.0
    """total_waste / total_material_used * 100, or 0 when nothing was used."""

    material_cost: float = 0.0
    waste_cost: float = 0.0
    service_cost: float = 0.0
    total_cost: float = 0.0

    discount_percent: float = 0.0
    """Effective discount after clamping to [0, 100]."""

    discount_amount: float = 0.0
    final_cost: float = 0.0

    @property
    def final_cost_whole(self) -> int:
        """final_cost rounded to whole currency units (used when saving an order)."""
        return to_whole_units(self.final_cost)

    def to_dict(self) -> Dict[str, Any]:
        """Full-precision dictionary for order snapshots."""
        return asdict(self)

    def to_display_dict(self) -> Dict[str, Any]:
        """Rounded dictionary for tables and receipts."""
        return {
            "total_print_area": round_area(self.total_print_area),
            "total_material_used": round_area(self.total_material_used),
            "total_waste": round_area(self.total_waste),
            "waste_percentage": round(self.waste_percentage, 2),
            "material_cost": to_whole_units(self.material_cost),
            "waste_cost": to_whole_units(self.waste_cost),
            "service_cost": to_whole_units(self.service_cost),
            "total_cost": to_whole_units(self.total_cost),
            "discount_percent": self.discount_percent,
            "discount_amount": to_whole_units(self.discount_amount),
            "final_cost": self.final_cost_whole,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostBreakdown":
        """Create from a to_dict() snapshot."""
        return cls(**{key: float(data.get(key, 0.0)) for key in cls.__dataclass_fields__})
