"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from rmctl.frontends.cli.repl.registry import CommandContext
from rmctl.frontends.cli.repl.state import SessionState
from rmctl.transport.client import ControllerClient
from rmctl.transport.protocols import Response

PRIMARY_ADDRESS = "/tmp/rmctld-primary.sock"
BACKUP_ADDRESS = "/tmp/rmctld-backup.sock"


def make_transport(address: str, response: Response | None = None) -> Mock:
    """Mock transport answering every request with ``response``."""
    transport = Mock()
    transport.address = address
    transport.send_request = AsyncMock(return_value=response or Response(success=True, data={}))
    return transport


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The verbose/quiet commands change the package log level."""
    logger = logging.getLogger("rmctl")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture
def primary():
    return make_transport(PRIMARY_ADDRESS)


@pytest.fixture
def backup():
    return make_transport(BACKUP_ADDRESS)


@pytest.fixture
def client(primary, backup):
    return ControllerClient(primary=primary, backup=backup, timeout=5.0)


@pytest.fixture
def ctx(state, client):
    return CommandContext(state=state, client=client)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment with no rmctl settings and an empty home directory."""
    for key in (
        "RMCTL_CONTROLLER",
        "RMCTL_BACKUP_CONTROLLER",
        "RMCTL_TIMEOUT",
        "RMCTL_CONFIG",
        "RMCTL_ALL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path
