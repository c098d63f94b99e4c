"""
API routes.

Handles:
- /api/health                       - Health check endpoint
- /api/catalog                      - Current price list
- /api/catalog/materials/<key>      - Edit a material's prices (privileged)
- /api/catalog/services/<key>       - Edit a service's price (privileged)
- /api/reports/payments             - Money received per payment method
"""

from flask import Blueprint, abort, current_app, request

from core.exceptions import ValidationError
from modules.numeric import parse_non_negative
from services.reconciliation import outstanding_total, payment_totals_by_method
from logging_config import get_logger
from .helpers import is_privileged, json_body


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    catalog_service = current_app.config.get("CATALOG_SERVICE")
    if catalog_service:
        health_status["checks"]["catalog"] = f"v{catalog_service.version}"
    else:
        health_status["checks"]["catalog"] = "not_loaded"
        health_status["status"] = "degraded"

    for name, key in (("store", "STORE"), ("ledger_service", "LEDGER_SERVICE")):
        if current_app.config.get(key):
            health_status["checks"][name] = "ok"
        else:
            health_status["checks"][name] = "not_available"
            health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


@api_bp.route("/api/catalog", methods=["GET"])
def catalog():
    """
    List materials and services.

    Query args:
        category: Only materials of this pricing category
        material: Only services applicable to this material
    """
    catalog_service = current_app.config["CATALOG_SERVICE"]
    category = request.args.get("category") or None
    material_key = request.args.get("material") or None

    materials = catalog_service.list_materials(category)
    services = catalog_service.list_services(material_key)

    return {
        "version": catalog_service.version,
        "materials": [m.to_dict() for m in materials],
        "services": [s.to_dict() for s in services],
    }


@api_bp.route("/api/catalog/materials/<key>", methods=["PUT"])
def update_material(key: str):
    """
    Change a material's prices.

    Body:
        unit_price and/or waste_unit_price

    Draft items keep the prices they were added with.
    """
    _require_privileged()
    data = json_body()
    if "unit_price" not in data and "waste_unit_price" not in data:
        raise ValidationError("Provide unit_price or waste_unit_price", field="unit_price")

    # Validate both before applying either
    for field in ("unit_price", "waste_unit_price"):
        if field in data:
            parse_non_negative(data[field], field)

    catalog_service = current_app.config["CATALOG_SERVICE"]
    if "unit_price" in data:
        catalog_service.update_material_price(key, data["unit_price"])
    if "waste_unit_price" in data:
        catalog_service.update_material_waste_price(key, data["waste_unit_price"])

    return {
        "version": catalog_service.version,
        "material": catalog_service.get_material(key).to_dict(),
    }


@api_bp.route("/api/catalog/services/<key>", methods=["PUT"])
def update_service(key: str):
    """Change a service's unit price. Body: unit_price."""
    _require_privileged()
    data = json_body()
    if "unit_price" not in data:
        raise ValidationError("unit_price is required", field="unit_price")

    catalog_service = current_app.config["CATALOG_SERVICE"]
    catalog_service.update_service_price(key, data["unit_price"])
    return {
        "version": catalog_service.version,
        "service": catalog_service.get_service(key).to_dict(),
    }


@api_bp.route("/api/reports/payments", methods=["GET"])
def payment_report():
    """
    Money received per payment method, split into orders and expenses.

    Baseline advances count under the parent's method. Order entries count
    only once approved; expense entries always count. outstanding is the
    sum of remaining balances, recomputed from each ledger.
    """
    store = current_app.config["STORE"]
    entries = store.list_entries()
    report = {}

    for section, parents in (("orders", store.list_orders()), ("expenses", store.list_expenses())):
        ledgers = {p.id: store.load_ledger(p.id) for p in parents}
        report[section] = {
            "by_method": payment_totals_by_method(parents, entries),
            "outstanding": outstanding_total(parents, ledgers),
            "count": len(parents),
        }

    return report


def _require_privileged() -> None:
    if not is_privileged():
        abort(403, description="Only privileged roles may change catalog prices")
