"""
Flask route blueprints for SignOrderLedger.

This module contains all route handlers organized by functionality:
- api: Health check and catalog listing
- drafts: Session-held draft editing and pricing
- orders: Order and expense creation and lookup
- ledger: Ledger entries, approval queue and history

All routes speak JSON. Domain errors are turned into JSON responses by the
error handlers registered in create_app().
"""

from .api import api_bp
from .drafts import drafts_bp
from .orders import orders_bp
from .ledger import ledger_bp

__all__ = [
    "api_bp",
    "drafts_bp",
    "orders_bp",
    "ledger_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(api_bp)
    app.register_blueprint(drafts_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(ledger_bp)
