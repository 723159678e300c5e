"""Tests for logging configuration."""

import json
import logging
import sys

import pytest

from snippetcheck.utils.logging_setup import (
    JSONFormatter,
    get_logger,
    log_operation,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("snippetcheck")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestLogging:
    """Package logger setup."""

    def test_get_logger_prefixes_name(self):
        assert get_logger("reporting").name == "snippetcheck.reporting"
        assert get_logger("snippetcheck.cli").name == "snippetcheck.cli"

    def test_setup_console_only(self):
        logger = setup_logging(level="INFO")

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_setup_is_repeatable(self):
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_log_file_receives_json(self, tmp_path):
        log_file = tmp_path / "logs" / "run.jsonl"
        setup_logging(level="WARNING", log_file=log_file, console=False)

        log_operation(get_logger("cli"), "run_check", root="docs")

        for handler in logging.getLogger("snippetcheck").handlers:
            handler.flush()
        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert record["level"] == "INFO"
        assert record["operation"] == "run_check"
        assert record["root"] == "docs"

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
            )

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "failed"
        assert "ValueError" in data["exception"]
