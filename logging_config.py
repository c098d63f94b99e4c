"""
Logging setup for SignOrderLedger.

Every line carries the acting role and the request it belongs to, so the
approval trail of a ledger entry can be read straight from the log: who
recorded the payment, who approved it, and through which endpoint.

Outside a request (startup, tests calling services directly) both fields
are "-".

Log Format:
    2026-10-19 10:15:31 INFO     admin POST /ledger/a1b2c3d4/entries sign_order_ledger.parent.a1b2c3d4 - Added payment 300000 via cash (approved), remaining=500000

Usage:
    setup_logging(log_level=logging.INFO, log_dir=Path("logs"))

    logger = get_logger(__name__)
    parent_logger = get_parent_logger(order.id)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

from flask import has_request_context, request


APP_LOGGER_NAME = "sign_order_ledger"
ROLE_HEADER = "X-Actor-Role"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(actor)s %(endpoint)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RequestContextFilter(logging.Filter):
    """Adds ``actor`` and ``endpoint`` attributes to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.actor = request.headers.get(ROLE_HEADER, "").strip().lower() or "anonymous"
            record.endpoint = f"{request.method} {request.path}"
        else:
            record.actor = "-"
            record.endpoint = "-"
        return True


def _attach(logger: logging.Logger, handler: logging.Handler, level: int,
            filters: Iterable[logging.Filter]) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    for log_filter in filters:
        handler.addFilter(log_filter)
    logger.addHandler(handler)


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the application logger.

    Console output is always on. When log_dir is given, all records also go
    to ``<log_dir>/sign_order_ledger.log`` and ERROR and above to
    ``sign_order_ledger_error.log``, both rotated at max_bytes.

    Calling it again replaces the previous handlers.

    Returns:
        The application logger
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    filters = [RequestContextFilter()]
    _attach(logger, logging.StreamHandler(sys.stdout), log_level, filters)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        for suffix, level in (("", log_level), ("_error", logging.ERROR)):
            handler = RotatingFileHandler(
                filename=log_dir / f"{APP_LOGGER_NAME}{suffix}.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            _attach(logger, handler, level, filters)

        logger.info(f"File logging enabled in {log_dir}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the application namespace (pass ``__name__``)."""
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_parent_logger(parent_id: str) -> logging.Logger:
    """
    Logger for one order or expense, named by the first 8 characters of
    its id, so a single ledger's history can be grepped out of the log.
    """
    return logging.getLogger(f"{APP_LOGGER_NAME}.parent.{parent_id[:8]}")
