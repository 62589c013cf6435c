"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager

from rmctl.core.logging_config import JsonFormatter, configure_logging, set_level


@contextmanager
def preserved_root_logger():
    """Restore the root logger after the block reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        yield root
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format_basic_record(self):
        record = logging.LogRecord(
            "rmctl.transport.client",
            logging.DEBUG,
            __file__,
            1,
            "request_sent: type=%s",
            ("PING",),
            None,
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "DEBUG"
        assert data["logger"] == "rmctl.transport.client"
        assert data["message"] == "request_sent: type=PING"
        assert "extra" not in data

    def test_format_includes_extra_fields(self):
        record = logging.LogRecord("rmctl", logging.INFO, __file__, 1, "hello", (), None)
        record.address = "/tmp/rmctld.sock"

        data = json.loads(JsonFormatter().format(record))

        assert data["extra"] == {"address": "/tmp/rmctld.sock"}


class TestConfigureLogging:
    """Tests for configure_logging and set_level."""

    def test_configure_json(self):
        with preserved_root_logger() as root:
            configure_logging(level="DEBUG", format="json", force=True)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_configure_from_environment(self, monkeypatch):
        monkeypatch.setenv("RMCTL_LOG_LEVEL", "error")
        monkeypatch.setenv("RMCTL_LOG_FORMAT", "text")

        with preserved_root_logger() as root:
            configure_logging(force=True)

            assert root.level == logging.ERROR
            assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_configure_with_file(self, tmp_path):
        log_file = tmp_path / "rmctl.log"

        with preserved_root_logger() as root:
            configure_logging(level="INFO", file_path=str(log_file), force=True)
            logging.getLogger("rmctl.test").info("written")
            for handler in root.handlers:
                handler.flush()

        assert "written" in log_file.read_text()

    def test_set_level_targets_package_logger(self):
        set_level("DEBUG")

        assert logging.getLogger("rmctl").level == logging.DEBUG
