# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and setup."""

from __future__ import annotations

import json
import logging

import pytest

from resumelens.config.settings import Settings
from resumelens.logging.context import set_analyzer_context, set_run_context, set_stage_context
from resumelens.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="resumelens.test", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonFormatter:
    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "resumelens.test"
        assert data["message"] == "hello"
        assert "context" not in data

    def test_includes_context(self):
        set_run_context("f" * 64, "run1")
        set_stage_context("collecting")
        data = json.loads(JsonFormatter().format(_record()))
        assert data["context"]["run_id"] == "run1"
        assert data["context"]["stage"] == "collecting"

    def test_includes_extra_data(self):
        data = json.loads(JsonFormatter().format(_record(data={"score": 80})))
        assert data["data"] == {"score": 80}

    def test_includes_exception(self):
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            import sys
            record = _record()
            record.exc_info = sys.exc_info()
        data = json.loads(JsonFormatter().format(record))
        assert "kaput" in data["exception"]


class TestTextFormatter:
    def test_short_fingerprint_stage_and_analyzer(self):
        set_run_context("0123456789abcdef" * 4, "run1")
        set_stage_context("collecting")
        set_analyzer_context("ats")
        line = TextFormatter().format(_record())
        assert "<0123456789ab>" in line
        assert "(collecting)" in line
        assert "[ats]" in line
        assert line.endswith("- hello")


class TestSetupLogging:
    def test_get_logger_is_namespaced(self):
        assert get_logger("cache").name == "resumelens.cache"

    def test_console_handler(self):
        setup_logging(level="DEBUG", log_format="text")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(ROOT_LOGGER).handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "resumelens.log"
        setup_logging(log_file=str(log_file))
        logging.getLogger("resumelens.test").info("written")
        for handler in logging.getLogger(ROOT_LOGGER).handlers:
            handler.flush()
        assert "written" in log_file.read_text()

    def test_from_settings_level_override(self):
        settings = Settings(_env_file=None, log_level="WARNING", log_format="text")
        setup_logging_from_settings(settings, level="DEBUG")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)
