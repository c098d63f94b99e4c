"""
Catalog service holding the current price-list snapshot.

The catalog is an immutable Catalog object; price edits build a new
snapshot with version + 1 and swap the reference. Readers call snapshot()
once per request and price against that object, so a concurrent edit
never changes prices halfway through a pricing call.

Thread Safety:
    - Readers take the current reference without copying
    - Writers serialize on a lock while building the next snapshot

Usage:
    # At app startup
    catalog_service = CatalogService.from_file(app.config["CATALOG_PATH"])

    # In routes
    catalog = catalog_service.snapshot()
    breakdown = price(draft.items, catalog, draft.discount_percent)
"""

from __future__ import annotations

import json
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from core.exceptions import ValidationError
from models.catalog import Catalog, Material, PricingCategory, Service
from modules.catalog_data import get_default_catalog_data
from modules.numeric import parse_non_negative
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class CatalogService:
    """
    Provider of catalog snapshots and price edits.

    Attributes:
        version: Version of the current snapshot
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        """
        Initialize catalog service.

        Args:
            catalog: Initial snapshot (default price list if not provided)
        """
        self._catalog = catalog or Catalog.from_dict(get_default_catalog_data())
        self._lock = threading.Lock()
        logger.info(
            f"Catalog loaded: {len(self._catalog.materials)} materials, "
            f"{len(self._catalog.services)} services (v{self._catalog.version})"
        )

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "CatalogService":
        """
        Load the catalog from a JSON file, or the default price list.

        Args:
            path: JSON file in catalog format; None or empty uses defaults

        Raises:
            ValidationError: If the file cannot be read or parsed
        """
        if not path:
            return cls()

        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Cannot load catalog file {path}: {e}", field="CATALOG_PATH")

        logger.info(f"Loading catalog from {path}")
        return cls(Catalog.from_dict(data))

    @property
    def version(self) -> int:
        return self._catalog.version

    def snapshot(self) -> Catalog:
        """Current immutable catalog snapshot."""
        return self._catalog

    def get_material(self, key: str) -> Material:
        return self._catalog.get_material(key)

    def get_service(self, key: str) -> Service:
        return self._catalog.get_service(key)

    def list_materials(self, category: Optional[Union[str, PricingCategory]] = None) -> List[Material]:
        if category is not None:
            category = PricingCategory.parse(category)
        return self._catalog.list_materials(category)

    def list_services(self, material_key: Optional[str] = None) -> List[Service]:
        return self._catalog.list_services(material_key)

    # =========================================================================
    # PRICE EDITS
    # =========================================================================

    def update_material_price(self, key: str, unit_price: Any) -> Catalog:
        """
        Change a material's unit price.

        Items already in a draft keep the price they were created with.

        Raises:
            ValidationError: Negative or non-numeric price
            UnknownReferenceError: Unknown material
        """
        value = parse_non_negative(unit_price, "unit_price")
        return self._update_material(key, unit_price=value)

    def update_material_waste_price(self, key: str, waste_unit_price: Any) -> Catalog:
        value = parse_non_negative(waste_unit_price, "waste_unit_price")
        return self._update_material(key, waste_unit_price=value)

    def update_service_price(self, key: str, unit_price: Any) -> Catalog:
        """
        Change a service's unit price.

        Raises:
            ValidationError: Negative or non-numeric price
            UnknownReferenceError: Unknown service
        """
        value = parse_non_negative(unit_price, "unit_price")
        with self._lock:
            service = self._catalog.get_service(key)
            self._catalog = self._catalog.with_service(replace(service, unit_price=value))
            logger.info(f"Service {key} price set to {value} (v{self._catalog.version})")
            return self._catalog

    def _update_material(self, key: str, **changes: float) -> Catalog:
        with self._lock:
            material = self._catalog.get_material(key)
            self._catalog = self._catalog.with_material(replace(material, **changes))
            logger.info(f"Material {key} updated {changes} (v{self._catalog.version})")
            return self._catalog

    def to_dict(self) -> Dict[str, Any]:
        return self._catalog.to_dict()
