"""
SignOrderLedger - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Configures logging
3. Creates the catalog, store, order and ledger services
4. Registers route blueprints
5. Sets up JSON error handlers

ARCHITECTURE:
    Flask request thread
    ├── CatalogService.snapshot()      immutable price list
    ├── draft_service / pricing_engine pure, session-held draft
    └── OrderService / LedgerService
        └── InMemoryStore.unit_of_work()

The pricing and reconciliation core performs no I/O; everything that
persists goes through the store.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import (
    InvalidTransitionError,
    SignOrderError,
    UnknownReferenceError,
    ValidationError,
)
from services.catalog_service import CatalogService
from services.ledger_service import LedgerService
from services.order_service import OrderService
from services.store import InMemoryStore
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)

ERROR_STATUS_CODES = {
    ValidationError: 400,
    UnknownReferenceError: 404,
    InvalidTransitionError: 409,
}


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In a frozen bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str = "config.Config", store: InMemoryStore = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the config class
        store: Optional pre-built store (tests inject one)

    Returns:
        Configured Flask application

    Raises:
        ValidationError: If CATALOG_PATH is set but cannot be loaded
    """
    # Load .env from base path (next to executable in production)
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO

    root_logger = setup_logging(
        log_level=log_level,
        log_dir=app.config.get("LOG_DIR") or None,
        max_bytes=app.config.get("LOG_MAX_BYTES", 10 * 1024 * 1024),
        backup_count=app.config.get("LOG_BACKUP_COUNT", 5),
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting SignOrderLedger in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    try:
        catalog_service = CatalogService.from_file(app.config.get("CATALOG_PATH"))
    except ValidationError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    store = store if store is not None else InMemoryStore()

    # Store in app config for access by routes
    app.config["CATALOG_SERVICE"] = catalog_service
    app.config["STORE"] = store
    app.config["ORDER_SERVICE"] = OrderService(store)
    app.config["LEDGER_SERVICE"] = LedgerService(store)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(SignOrderError)
    def handle_domain_error(e: SignOrderError):
        status_code = ERROR_STATUS_CODES.get(type(e), 400)
        logger.warning(f"{type(e).__name__} ({status_code}): {e}")
        return e.to_dict(), status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return {
            "error": e.name.lower().replace(" ", "_"),
            "message": e.description,
            "details": {},
        }, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again.",
            "details": {},
        }, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
