"""
Tests for the logging setup.
"""

import logging

from logging_config import APP_LOGGER_NAME, RequestContextFilter, get_parent_logger, setup_logging


def _record(message="x"):
    return logging.LogRecord(APP_LOGGER_NAME, logging.INFO, __file__, 1, message, None, None)


class TestRequestContextFilter:
    """Actor and endpoint attributes."""

    def test_outside_request(self):
        record = _record()

        assert RequestContextFilter().filter(record) is True
        assert record.actor == "-"
        assert record.endpoint == "-"

    def test_inside_request(self, app):
        record = _record()

        with app.test_request_context("/orders", method="POST", headers={"X-Actor-Role": " Admin "}):
            RequestContextFilter().filter(record)

        assert record.actor == "admin"
        assert record.endpoint == "POST /orders"

    def test_request_without_role(self, app):
        record = _record()

        with app.test_request_context("/ledger/pending"):
            RequestContextFilter().filter(record)

        assert record.actor == "anonymous"


class TestSetupLogging:
    """Handlers and log files."""

    def test_console_only_by_default(self):
        logger = setup_logging()

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_file_logging(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path / "logs")
        try:
            get_parent_logger("order-123456789").info("payment recorded")
            logger.error("balance write failed")

            main_log = (tmp_path / "logs" / f"{APP_LOGGER_NAME}.log").read_text(encoding="utf-8")
            error_log = (tmp_path / "logs" / f"{APP_LOGGER_NAME}_error.log").read_text(encoding="utf-8")
        finally:
            for handler in logger.handlers:
                handler.close()
            setup_logging()

        assert "sign_order_ledger.parent.order-12 - payment recorded" in main_log
        assert "balance write failed" in error_log
        assert "payment recorded" not in error_log
