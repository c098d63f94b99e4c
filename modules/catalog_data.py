"""
Default Catalog Data

Provides the shop's default price list, used when no CATALOG_PATH override
is configured. Prices are in whole currency units (so'm):
- Area materials (roll media) are priced per m² with a waste price per m²
- Light-box, plaque and stand materials are priced per m² without waste
- Letters are priced per centimetre of height
- Badges, statuettes and bolts are priced per piece
"""

from typing import Dict, Any


# Roll media. Widths are the roll widths in metres.
AREA_MATERIALS: Dict[str, Dict[str, Any]] = {
    "banner": {
        "display_name": "Banner",
        "category": "area",
        "width_variants": [3.2, 2.6, 2.2, 1.8, 1.6, 1.3, 1.1],
        "unit_price": 35000,
        "waste_unit_price": 15000,
    },
    "oracal": {
        "display_name": "Oracal vinyl",
        "category": "area",
        "width_variants": [1.52, 1.27, 1.07],
        "unit_price": 45000,
        "waste_unit_price": 20000,
    },
    "mesh_oracal": {
        "display_name": "Mesh vinyl",
        "category": "area",
        "width_variants": [1.52, 1.27, 1.07],
        "unit_price": 55000,
        "waste_unit_price": 25000,
    },
    "clear_oracal": {
        "display_name": "Clear vinyl",
        "category": "area",
        "width_variants": [1.52, 1.27, 1.07],
        "unit_price": 55000,
        "waste_unit_price": 25000,
    },
    "canvas": {
        "display_name": "Canvas",
        "category": "area",
        "width_variants": [1.5, 1.2, 0.9],
        "unit_price": 120000,
        "waste_unit_price": 50000,
    },
    "backprint": {
        "display_name": "Backprint film",
        "category": "area",
        "width_variants": [0.9, 1.22, 1.52],
        "unit_price": 80000,
        "waste_unit_price": 35000,
    },
    "sun_control": {
        "display_name": "Sun control film",
        "category": "area",
        "width_variants": [1.52, 0.76],
        "unit_price": 150000,
        "waste_unit_price": 50000,
    },
    "tint": {
        "display_name": "Window tint",
        "category": "area",
        "width_variants": [1.52, 0.76],
        "unit_price": 120000,
        "waste_unit_price": 65000,
    },
    "frosted": {
        "display_name": "Frosted film",
        "category": "area",
        "width_variants": [1.27],
        "unit_price": 120000,
        "waste_unit_price": 45000,
    },
}

# Flat area products: no roll, so no waste.
LIGHTBOX_MATERIALS: Dict[str, Dict[str, Any]] = {
    "light_box": {"display_name": "Light box", "category": "lightbox", "unit_price": 1800000},
    "fabric_box": {"display_name": "Fabric light box", "category": "lightbox", "unit_price": 1500000},
    "romark_plaque": {"display_name": "Romark (ABS) plaque", "category": "lightbox", "unit_price": 1400000},
    "alucobond_plaque": {"display_name": "Acrylic on alucobond plaque", "category": "lightbox", "unit_price": 1900000},
    "acrylic_plaque": {"display_name": "Acrylic plaque", "category": "lightbox", "unit_price": 2200000},
    "stand_plexi_3mm": {"display_name": "Stand, plexiglass 3mm", "category": "lightbox", "unit_price": 500000},
    "stand_plexi_5mm": {"display_name": "Stand, plexiglass 5mm", "category": "lightbox", "unit_price": 650000},
    "stand_alucobond": {"display_name": "Stand, alucobond", "category": "lightbox", "unit_price": 500000},
    "stand_foamex": {"display_name": "Stand, foamex", "category": "lightbox", "unit_price": 350000},
}

LINEAR_MATERIALS: Dict[str, Dict[str, Any]] = {
    "acrylic_letters": {"display_name": "Acrylic letters", "category": "linear", "unit_price": 9000},
    "volumetric_letters": {"display_name": "Volumetric letters", "category": "linear", "unit_price": 12000},
    "volumetric_letters_led": {"display_name": "Volumetric letters with LED", "category": "linear", "unit_price": 18000},
}

# Per-piece products. Badges carry a nominal waste price that is not billed.
PER_UNIT_MATERIALS: Dict[str, Dict[str, Any]] = {
    "badge": {"display_name": "Badge (7x4 cm)", "category": "per-unit", "unit_price": 35000, "waste_unit_price": 5000},
    "premium_badge": {"display_name": "Premium badge (7x4 cm)", "category": "per-unit", "unit_price": 55000, "waste_unit_price": 8000},
    "statuette": {"display_name": "Acrylic statuette", "category": "per-unit", "unit_price": 200000, "waste_unit_price": 40000},
    "standoff_bolt": {"display_name": "Standoff bolt", "category": "per-unit", "unit_price": 6000, "waste_unit_price": 2000},
}

SERVICES: Dict[str, Dict[str, Any]] = {
    "none": {"display_name": "No service", "unit_price": 0, "pricing_mode": "fixed"},
    "banner_install": {
        "display_name": "Banner installation",
        "unit_price": 25000,
        "pricing_mode": "per-area",
        "material_keys": ["banner"],
    },
    "banner_install_rail": {
        "display_name": "Banner installation with rail",
        "unit_price": 55000,
        "pricing_mode": "per-area",
        "material_keys": ["banner"],
    },
    "banner_rail_only": {
        "display_name": "Rail without installation",
        "unit_price": 30000,
        "pricing_mode": "per-area",
        "material_keys": ["banner"],
    },
    "canvas_install": {
        "display_name": "Canvas installation",
        "unit_price": 25000,
        "pricing_mode": "per-area",
        "material_keys": ["canvas"],
    },
    "canvas_install_rail": {
        "display_name": "Canvas installation with rail",
        "unit_price": 55000,
        "pricing_mode": "per-area",
        "material_keys": ["canvas"],
    },
    "oracal_install": {
        "display_name": "Vinyl installation",
        "unit_price": 45000,
        "pricing_mode": "per-area",
        "material_keys": ["oracal", "mesh_oracal", "clear_oracal"],
    },
    "oracal_install_removal": {
        "display_name": "Vinyl installation and removal",
        "unit_price": 60000,
        "pricing_mode": "per-area",
        "material_keys": ["oracal", "mesh_oracal", "clear_oracal"],
    },
    "old_sign_removal": {
        "display_name": "Old sign removal",
        "unit_price": 150000,
        "pricing_mode": "fixed",
    },
}


def get_default_catalog_data() -> Dict[str, Any]:
    """Return the default price list in catalog-file format."""
    materials: Dict[str, Dict[str, Any]] = {}
    for group in (AREA_MATERIALS, LIGHTBOX_MATERIALS, LINEAR_MATERIALS, PER_UNIT_MATERIALS):
        materials.update({key: dict(value) for key, value in group.items()})
    return {
        "materials": materials,
        "services": {key: dict(value) for key, value in SERVICES.items()},
    }
