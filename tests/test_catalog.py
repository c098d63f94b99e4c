"""
Unit tests for the catalog model and CatalogService.
"""

import json

import pytest

from core.exceptions import UnknownReferenceError, ValidationError
from models.catalog import Catalog, PricingCategory, ServicePricingMode
from models.line_item import DraftState
from services import draft_service
from services.catalog_service import CatalogService
from services.pricing_engine import price


class TestDefaultCatalog:
    """Built-in price list."""

    def test_every_category_is_present(self, default_catalog_service):
        for category in PricingCategory:
            assert default_catalog_service.list_materials(category)

    def test_category_filter_accepts_strings(self, default_catalog_service):
        materials = default_catalog_service.list_materials("per-unit")

        assert {m.key for m in materials} >= {"badge", "statuette"}

    def test_unknown_category(self, default_catalog_service):
        with pytest.raises(ValidationError):
            default_catalog_service.list_materials("weight")

    def test_services_for_material(self, default_catalog_service):
        keys = {s.key for s in default_catalog_service.list_services("banner")}

        assert {"none", "banner_install", "old_sign_removal"} <= keys
        assert "oracal_install" not in keys

    def test_banner_rolls(self, default_catalog_service):
        banner = default_catalog_service.get_material("banner")

        assert banner.is_width_constrained
        assert 1.6 in banner.width_variants

    def test_unknown_keys(self, default_catalog_service):
        with pytest.raises(UnknownReferenceError):
            default_catalog_service.get_material("gold_leaf")
        with pytest.raises(UnknownReferenceError):
            default_catalog_service.get_service("teleport")


class TestPriceEdits:
    """Price edits produce new snapshots."""

    def test_update_material_price_bumps_version(self, default_catalog_service):
        before = default_catalog_service.snapshot()

        after = default_catalog_service.update_material_price("badge", 40000)

        assert after.version == before.version + 1
        assert after.get_material("badge").unit_price == 40000
        assert before.get_material("badge").unit_price == 35000

    def test_existing_items_keep_their_price(self, default_catalog_service):
        draft = draft_service.add_line_item(
            DraftState(), default_catalog_service.snapshot(), "badge", quantity=10
        )

        default_catalog_service.update_material_price("badge", 99000)
        breakdown = price(draft.items, default_catalog_service.snapshot())

        assert breakdown.material_cost == pytest.approx(350000)

    def test_waste_price_edit_applies_to_existing_items(self, default_catalog_service):
        draft = draft_service.add_line_item(
            DraftState(), default_catalog_service.snapshot(), "banner", 1.5, 1.0
        )

        default_catalog_service.update_material_waste_price("banner", 0)
        breakdown = price(draft.items, default_catalog_service.snapshot())

        assert breakdown.waste_cost == 0

    def test_update_service_price(self, default_catalog_service):
        catalog = default_catalog_service.update_service_price("old_sign_removal", "175000")

        assert catalog.get_service("old_sign_removal").unit_price == 175000

    @pytest.mark.parametrize("value", [-1, "abc", None])
    def test_rejects_bad_prices(self, default_catalog_service, value):
        with pytest.raises(ValidationError):
            default_catalog_service.update_material_price("badge", value)

    def test_update_unknown_material(self, default_catalog_service):
        with pytest.raises(UnknownReferenceError):
            default_catalog_service.update_material_price("gold_leaf", 10)


class TestCatalogFile:
    """Loading a catalog from JSON."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "version": 7,
            "materials": {
                "badge": {"display_name": "Badge", "category": "per-unit", "unit_price": 30000},
            },
            "services": {
                "mounting": {"display_name": "Mounting", "unit_price": 1000, "pricing_mode": "per_sqm"},
            },
        }), encoding="utf-8")

        service = CatalogService.from_file(path)

        assert service.version == 7
        assert service.get_material("badge").unit_price == 30000
        assert service.get_service("mounting").pricing_mode is ServicePricingMode.PER_AREA
        assert service.get_service("none").unit_price == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError):
            CatalogService.from_file(tmp_path / "missing.json")

    def test_empty_path_uses_defaults(self):
        assert CatalogService.from_file("").get_material("banner")

    def test_round_trip(self, catalog):
        assert Catalog.from_dict(catalog.to_dict()) == catalog
