"""
Configuration for SignOrderLedger.

Values come from the environment (optionally a .env file next to this
module). The catalog defaults to the built-in price list unless
CATALOG_PATH points at a JSON file in catalog format.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


def _split_roles(raw: str) -> frozenset:
    return frozenset(role.strip().lower() for role in raw.split(",") if role.strip())


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "sign_order_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # JSON bodies only

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Optional JSON price list; empty means the built-in defaults
    CATALOG_PATH = os.environ.get("CATALOG_PATH", "")

    # ==========================================================================
    # Draft and input limits
    # ==========================================================================
    # MAX_LINE_ITEMS: items a single draft may hold (session cookie size)
    # MAX_TEXT_LENGTH: customer names, phone numbers, descriptions
    # ==========================================================================
    MAX_LINE_ITEMS = int(os.environ.get("MAX_LINE_ITEMS", "50"))
    MAX_TEXT_LENGTH = int(os.environ.get("MAX_TEXT_LENGTH", "200"))

    # ==========================================================================
    # Ledger approval
    # ==========================================================================
    # Entries recorded by these roles start approved; all other order
    # entries start pending. The role is read from the X-Actor-Role header.
    # ==========================================================================
    PRIVILEGED_ROLES = _split_roles(os.environ.get("PRIVILEGED_ROLES", "admin,owner"))

    # ==========================================================================
    # Logging
    # ==========================================================================
    # LOG_DIR: where rotating log files go; empty means console only
    # ==========================================================================
    LOG_DIR = os.environ.get("LOG_DIR", "")
    LOG_MAX_BYTES = int(os.environ.get("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
    LOG_BACKUP_COUNT = int(os.environ.get("LOG_BACKUP_COUNT", "5"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"
    LOG_DIR = os.environ.get("LOG_DIR", str(BASE_DIR / "logs"))
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    LOG_DIR = ""
    SECRET_KEY = "testing-secret-key"
    CATALOG_PATH = ""
    PRIVILEGED_ROLES = frozenset({"admin"})
