"""
Pricing engine for draft orders.

Turns a catalog snapshot and a list of line items into a CostBreakdown.
This is a pure function: no I/O, no shared state, safe to call from any
request thread.

Formulas by pricing category (w, h in metres; linear h in centimetres):

    area      print = w*h*q       used = roll_w*h*q   cost = print*price
              waste = |used - print|, billed at the material's waste price
    lightbox  print = w*h*q       used = print        cost = print*price
    linear    print = 0           used = 0            cost = h*q*price
    per-unit  print = 0           used = 0            cost = q*price
              (waste price billed per piece only when bill_waste is set)

Services: fixed services add their unit price once per item, per-area
services add print_area * unit_price.

Usage:
    catalog = catalog_service.snapshot()
    breakdown = price(draft.items, catalog, draft.discount_percent)
    print(breakdown.final_cost)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from models.catalog import Catalog, PricingCategory, ServicePricingMode
from models.cost_breakdown import CostBreakdown
from models.line_item import LineItem
from modules.numeric import clamp, parse_number
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class ItemCost:
    """Per-item pricing components (before aggregation)."""

    item_id: str
    print_area: float = 0.0
    material_used: float = 0.0
    waste: float = 0.0
    material_cost: float = 0.0
    waste_cost: float = 0.0
    service_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.material_cost + self.waste_cost + self.service_cost


def price_item(item: LineItem, catalog: Catalog) -> ItemCost:
    """
    Price a single line item.

    The material unit price comes from the item (frozen at creation).
    The catalog supplies waste prices and services.

    Raises:
        UnknownReferenceError: If the item's material or a service key is
            not in the catalog
    """
    material = catalog.get_material(item.material_key)
    unit_price = item.frozen_material_unit_price

    print_area = 0.0
    material_used = 0.0
    waste = 0.0
    waste_cost = 0.0

    if item.category is PricingCategory.AREA:
        print_area = item.width * item.height * item.quantity
        material_used = item.frozen_material_width * item.height * item.quantity
        material_cost = print_area * unit_price
        waste = abs(material_used - print_area)
        waste_cost = waste * material.waste_unit_price

    elif item.category is PricingCategory.LIGHTBOX:
        print_area = item.width * item.height * item.quantity
        material_used = print_area
        material_cost = print_area * unit_price

    elif item.category is PricingCategory.LINEAR:
        material_cost = item.height * item.quantity * unit_price

    else:
        material_cost = item.quantity * unit_price
        if material.bill_waste:
            waste_cost = item.quantity * material.waste_unit_price

    service_cost = 0.0
    for service_key in item.service_keys:
        service = catalog.get_service(service_key)
        if service.pricing_mode is ServicePricingMode.PER_AREA:
            service_cost += print_area * service.unit_price
        else:
            service_cost += service.unit_price

    return ItemCost(
        item_id=item.id,
        print_area=print_area,
        material_used=material_used,
        waste=waste,
        material_cost=material_cost,
        waste_cost=waste_cost,
        service_cost=service_cost,
    )


def price_items(items: Iterable[LineItem], catalog: Catalog) -> List[ItemCost]:
    """Price every visible item, preserving insertion order."""
    return [price_item(item, catalog) for item in items if item.visible]


def price(items: Iterable[LineItem], catalog: Catalog, discount_percent: float = 0.0) -> CostBreakdown:
    """
    Price a list of line items.

    Invisible items are skipped. Components are summed at full precision;
    the discount is clamped to [0, 100] and applied once to the total.

    Args:
        items: Line items in draft order
        catalog: Catalog snapshot used for this call
        discount_percent: Order-level discount percentage

    Returns:
        CostBreakdown for the visible items

    Raises:
        ValidationError: If discount_percent is not a finite number
        UnknownReferenceError: If an item references an unknown material
            or service
    """
    item_costs = price_items(items, catalog)

    total_print_area = sum(c.print_area for c in item_costs)
    total_material_used = sum(c.material_used for c in item_costs)
    total_waste = sum(c.waste for c in item_costs)
    material_cost = sum(c.material_cost for c in item_costs)
    waste_cost = sum(c.waste_cost for c in item_costs)
    service_cost = sum(c.service_cost for c in item_costs)

    if total_material_used > 0:
        waste_percentage = total_waste / total_material_used * 100
    else:
        waste_percentage = 0.0

    total_cost = material_cost + waste_cost + service_cost
    effective_discount = clamp(parse_number(discount_percent, "discount_percent"), 0.0, 100.0)
    discount_amount = total_cost * effective_discount / 100
    final_cost = total_cost - discount_amount

    logger.debug(
        f"Priced {len(item_costs)} items (catalog v{catalog.version}): "
        f"total={total_cost:.2f}, discount={effective_discount}%, final={final_cost:.2f}"
    )

    return CostBreakdown(
        total_print_area=total_print_area,
        total_material_used=total_material_used,
        total_waste=total_waste,
        waste_percentage=waste_percentage,
        material_cost=material_cost,
        waste_cost=waste_cost,
        service_cost=service_cost,
        total_cost=total_cost,
        discount_percent=effective_discount,
        discount_amount=discount_amount,
        final_cost=final_cost,
    )
