"""Logging setup for rmctl.

Operator-facing messages (usage errors, command output) are printed
directly by the command handlers. Logging carries diagnostics only:
which command matched, which request went to which controller, how the
controller answered. It stays at WARNING unless the operator asks for
more, either with ``verbose`` or through the environment.

Usage:
    from rmctl.core.logging_config import configure_logging

    configure_logging()            # once, at startup
    logger = logging.getLogger(__name__)

Environment Variables:
    RMCTL_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    RMCTL_LOG_FORMAT: Output format ("text" or "json")
    RMCTL_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logger that the verbose/quiet commands adjust
PACKAGE_LOGGER = "rmctl"

_configured = False

_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object per line.

    {"timestamp": "...", "level": "DEBUG", "logger": "rmctl.transport.client",
     "message": "request_sent: type=PING", "extra": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger.

    Called once by the CLI entry point. Later calls are ignored unless
    ``force`` is set.

    Args:
        level: Log level. Defaults to RMCTL_LOG_LEVEL or "WARNING".
        format: "text" or "json". Defaults to RMCTL_LOG_FORMAT or "text".
        file_path: Optional log file. Defaults to RMCTL_LOG_FILE.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("RMCTL_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("RMCTL_LOG_FORMAT", "text")  # type: ignore
    file_path = file_path or os.environ.get("RMCTL_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True


def set_level(level: str, logger_name: str | None = PACKAGE_LOGGER) -> None:
    """Set the level of one logger (the package logger by default)."""
    logging.getLogger(logger_name).setLevel(getattr(logging, level.upper()))
