"""
Tests for the logging setup.
"""
import json
import logging

import pytest

from possessao.utils import logger as logger_module
from possessao.utils.config import settings
from possessao.utils.logger import NOISY_LOGGERS, CustomJsonFormatter, setup_logging


@pytest.fixture
def restore_logging(monkeypatch):
    yield
    monkeypatch.undo()
    setup_logging()


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("possessao.test", logging.INFO, __file__, 1, message, None, None)


class TestSetupLogging:

    def test_noisy_loggers_are_silenced(self, monkeypatch, restore_logging):
        monkeypatch.setattr(logger_module.settings, "LOG_LEVEL", "INFO")
        setup_logging()

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_level_lets_noisy_loggers_through(self, monkeypatch, restore_logging):
        monkeypatch.setattr(logger_module.settings, "LOG_LEVEL", "DEBUG")
        setup_logging()

        assert logging.getLogger("httpx").level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    def test_file_handler(self, monkeypatch, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "app.log"
        monkeypatch.setattr(logger_module.settings, "LOG_FILE", str(log_file))
        root = setup_logging()

        assert log_file.parent.is_dir()
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        for handler in root.handlers:
            if isinstance(handler, logging.FileHandler):
                handler.close()

    def test_text_format(self, monkeypatch, restore_logging):
        monkeypatch.setattr(logger_module.settings, "LOG_FORMAT", "text")
        root = setup_logging()
        assert not isinstance(root.handlers[0].formatter, CustomJsonFormatter)


class TestJsonFormatter:

    def test_adds_app_fields(self):
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = _record("composition saved")
        record.request_id = "abc123"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "composition saved"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "possessao.test"
        assert payload["app_name"] == settings.APP_NAME
        assert payload["request_id"] == "abc123"
        assert payload["timestamp"].endswith("Z")
