"""Client configuration.

Values resolve with priority: explicit argument > environment > YAML
config file > default.

Environment Variables:
    RMCTL_CONTROLLER: Primary controller address
    RMCTL_BACKUP_CONTROLLER: Backup controller address
    RMCTL_TIMEOUT: Request timeout in seconds
    RMCTL_CONFIG: Path of the YAML config file
    RMCTL_ALL: If set (to anything), start with hidden entities shown

Addresses starting with ``http://`` or ``https://`` are HTTP endpoints;
anything else is the path of a Unix socket.

Example config file (``~/.config/rmctl/config.yaml``)::

    controller: http://ctl01:6817
    backup_controller: http://ctl02:6817
    timeout: 10
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER = "/tmp/rmctld.sock"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONFIG_PATH = Path("~/.config/rmctl/config.yaml")
ENV_FILE = ".env.local"


@dataclass
class RmctlConfig:
    """Resolved client configuration.

    Attributes:
        controller: Primary controller address.
        backup_controller: Backup controller address, if any.
        timeout: Seconds to wait for one request.
        show_all: Initial value of the session's "show all" flag.
    """

    controller: str = DEFAULT_CONTROLLER
    backup_controller: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    show_all: bool = False


def _read_config_file(config_file: str | None) -> dict[str, Any]:
    """Load the YAML config file, or return {} if there is none."""
    if config_file:
        path = Path(config_file).expanduser()
    else:
        path = DEFAULT_CONFIG_PATH.expanduser()
        if not path.exists():
            return {}

    # An explicitly named file that is missing is an error for the caller
    content = path.read_text()
    data = yaml.safe_load(content) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.debug("config_loaded: path=%s keys=%s", path, sorted(data))
    return data


def load_config(
    config_file: str | None = None,
    controller: str | None = None,
    backup_controller: str | None = None,
) -> RmctlConfig:
    """Resolve the client configuration.

    Args:
        config_file: YAML file path. Defaults to RMCTL_CONFIG, then
            ``~/.config/rmctl/config.yaml`` if it exists.
        controller: Primary controller address override.
        backup_controller: Backup controller address override.

    Raises:
        FileNotFoundError: An explicitly named config file does not exist.
        ValueError: The config file or RMCTL_TIMEOUT is malformed.
    """
    env_file = Path(ENV_FILE)
    if env_file.exists():
        load_dotenv(env_file)

    file_config = _read_config_file(config_file or os.environ.get("RMCTL_CONFIG"))

    def get_value(arg: str | None, env_key: str, file_key: str, default: Any) -> Any:
        if arg is not None:
            return arg
        env_val = os.environ.get(env_key)
        if env_val:
            return env_val
        file_val = file_config.get(file_key)
        if file_val is not None:
            return file_val
        return default

    timeout_value = get_value(None, "RMCTL_TIMEOUT", "timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout_value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid timeout: {timeout_value!r}") from None

    backup = get_value(backup_controller, "RMCTL_BACKUP_CONTROLLER", "backup_controller", None)

    return RmctlConfig(
        controller=str(get_value(controller, "RMCTL_CONTROLLER", "controller", DEFAULT_CONTROLLER)),
        backup_controller=str(backup) if backup else None,
        timeout=timeout,
        show_all="RMCTL_ALL" in os.environ or bool(file_config.get("show_all", False)),
    )
