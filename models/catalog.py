"""
Catalog data models.

These models represent point-in-time snapshots of the price list:
materials (with their declared pricing category) and services.

Thread Safety:
    - Material, Service and Catalog are frozen dataclasses (immutable)
    - Safe to read from any thread without locks
    - Price updates create a new Catalog with a bumped version
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any, List, Optional

from core.exceptions import UnknownReferenceError, ValidationError


NO_SERVICE = "none"
"""Service key meaning "no service selected"."""


class PricingCategory(Enum):
    """
    Formula family a line item is priced under.

    Declared on the material and copied onto the line item when it is added.
    """

    AREA = "area"
    """Banners, vinyl, canvas: area pricing plus roll waste."""

    LIGHTBOX = "lightbox"
    """Light boxes, fabric boxes, plaques and stands: area pricing, no waste."""

    LINEAR = "linear"
    """Letters priced by height in centimetres."""

    PER_UNIT = "per-unit"
    """Badges, statuettes, bolts: priced per piece."""

    @classmethod
    def parse(cls, value: Any) -> "PricingCategory":
        """Parse from enum or raw string, raising ValidationError on unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown pricing category: {value}", field="category", value=value)


class ServicePricingMode(Enum):
    """How a service's unit price is applied to a line item."""

    FIXED = "fixed"
    PER_AREA = "per-area"

    @classmethod
    def parse(cls, value: Any) -> "ServicePricingMode":
        if isinstance(value, cls):
            return value
        # Older price lists spell per-area as per_sqm
        if value == "per_sqm":
            return cls.PER_AREA
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown pricing mode: {value}", field="pricing_mode", value=value)


@dataclass(frozen=True)
class Material:
    """A priced material or product."""

    key: str
    """Catalog key (e.g., 'banner')."""

    display_name: str
    """Human-readable name for display."""

    unit_price: float
    """Price per m² (area/lightbox), per cm of height (linear) or per piece (per-unit)."""

    category: PricingCategory
    """Formula family items of this material are priced under."""

    width_variants: tuple[float, ...] = ()
    """Roll widths in metres. Empty means the material is not width-constrained."""

    waste_unit_price: float = 0.0
    """Price per m² of waste (area) or per piece (per-unit with bill_waste)."""

    bill_waste: bool = False
    """Per-unit materials only: whether waste_unit_price is actually charged."""

    @property
    def is_width_constrained(self) -> bool:
        """Whether line items must pick one of the width variants."""
        return bool(self.width_variants)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses and catalog files."""
        return {
            "key": self.key,
            "display_name": self.display_name,
            "unit_price": self.unit_price,
            "category": self.category.value,
            "width_variants": list(self.width_variants),
            "waste_unit_price": self.waste_unit_price,
            "bill_waste": self.bill_waste,
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "Material":
        """Create from dictionary (e.g., a JSON catalog file)."""
        return cls(
            key=key,
            display_name=data.get("display_name", key),
            unit_price=float(data.get("unit_price", 0)),
            category=PricingCategory.parse(data.get("category", "area")),
            width_variants=tuple(float(w) for w in data.get("width_variants", [])),
            waste_unit_price=float(data.get("waste_unit_price", 0)),
            bill_waste=bool(data.get("bill_waste", False)),
        )


@dataclass(frozen=True)
class Service:
    """An assembly/disassembly service that can be attached to a line item."""

    key: str
    display_name: str
    unit_price: float
    pricing_mode: ServicePricingMode = ServicePricingMode.FIXED
    material_keys: tuple[str, ...] = ()
    """Materials this service applies to. Empty means any material."""

    def applies_to(self, material_key: str) -> bool:
        """Whether this service may be attached to items of the given material."""
        return not self.material_keys or material_key in self.material_keys

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "unit_price": self.unit_price,
            "pricing_mode": self.pricing_mode.value,
            "material_keys": list(self.material_keys),
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "Service":
        return cls(
            key=key,
            display_name=data.get("display_name", key),
            unit_price=float(data.get("unit_price", 0)),
            pricing_mode=ServicePricingMode.parse(data.get("pricing_mode", "fixed")),
            material_keys=tuple(data.get("material_keys", [])),
        )


@dataclass(frozen=True)
class Catalog:
    """
    Versioned, immutable snapshot of the price list.

    This is a FROZEN dataclass - the pricing engine reads one snapshot per
    call. Price edits go through CatalogService, which swaps in a new
    snapshot with version + 1. Line items never hold a reference to a
    Catalog; they copy the unit price they were created with.

    Usage:
        catalog = catalog_service.snapshot()
        banner = catalog.get_material("banner")
        print(f"{banner.display_name}: {banner.unit_price}")
    """

    version: int
    """Monotonic snapshot version."""

    materials: tuple[Material, ...]
    """Immutable tuple of materials (use tuple for frozen dataclass)."""

    services: tuple[Service, ...]
    """Immutable tuple of services."""

    def get_material(self, key: str) -> Material:
        """
        Find material by key.

        Raises:
            UnknownReferenceError: If no material has this key
        """
        for material in self.materials:
            if material.key == key:
                return material
        raise UnknownReferenceError("material", key)

    def get_service(self, key: str) -> Service:
        """
        Find service by key.

        Raises:
            UnknownReferenceError: If no service has this key
        """
        for service in self.services:
            if service.key == key:
                return service
        raise UnknownReferenceError("service", key)

    def find_material(self, key: str) -> Optional[Material]:
        """Find material by key, returning None if absent."""
        return next((m for m in self.materials if m.key == key), None)

    def list_materials(self, category: Optional[PricingCategory] = None) -> List[Material]:
        """List materials in catalog order, optionally filtered by category."""
        return [m for m in self.materials if category is None or m.category == category]

    def list_services(self, material_key: Optional[str] = None) -> List[Service]:
        """List services in catalog order, optionally only those applicable to a material."""
        return [s for s in self.services if material_key is None or s.applies_to(material_key)]

    def with_material(self, material: Material) -> "Catalog":
        """Return a new snapshot with one material replaced and the version bumped."""
        self.get_material(material.key)
        materials = tuple(material if m.key == material.key else m for m in self.materials)
        return replace(self, version=self.version + 1, materials=materials)

    def with_service(self, service: Service) -> "Catalog":
        """Return a new snapshot with one service replaced and the version bumped."""
        self.get_service(service.key)
        services = tuple(service if s.key == service.key else s for s in self.services)
        return replace(self, version=self.version + 1, services=services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "materials": {m.key: m.to_dict() for m in self.materials},
            "services": {s.key: s.to_dict() for s in self.services},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version: int = 1) -> "Catalog":
        """
        Create snapshot from a catalog dictionary.

        Args:
            data: {"materials": {key: {...}}, "services": {key: {...}}}
            version: Version to stamp on the snapshot

        Returns:
            Catalog with parsed materials and services
        """
        materials = tuple(
            Material.from_dict(key, raw) for key, raw in data.get("materials", {}).items()
        )
        services = tuple(
            Service.from_dict(key, raw) for key, raw in data.get("services", {}).items()
        )
        if not any(s.key == NO_SERVICE for s in services):
            services = (Service(NO_SERVICE, "No service", 0.0),) + services
        return cls(version=data.get("version", version), materials=materials, services=services)
