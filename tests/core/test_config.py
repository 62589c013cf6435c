"""Tests for configuration loading."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from rmctl.core.config import DEFAULT_CONTROLLER, DEFAULT_TIMEOUT, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        config = load_config()

        assert config.controller == DEFAULT_CONTROLLER
        assert config.backup_controller is None
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.show_all is False

    def test_config_file(self, clean_env):
        path = clean_env / "rmctl.yaml"
        path.write_text(
            "controller: http://ctl01:6817\n"
            "backup_controller: http://ctl02:6817\n"
            "timeout: 10\n"
            "show_all: true\n"
        )

        config = load_config(config_file=str(path))

        assert config.controller == "http://ctl01:6817"
        assert config.backup_controller == "http://ctl02:6817"
        assert config.timeout == 10.0
        assert config.show_all is True

    def test_default_config_path(self, clean_env):
        path = clean_env / ".config" / "rmctl" / "config.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("controller: /run/rmctld.sock\n")

        assert load_config().controller == "/run/rmctld.sock"

    def test_config_file_from_environment(self, clean_env, monkeypatch):
        path = clean_env / "other.yaml"
        path.write_text("timeout: 3\n")
        monkeypatch.setenv("RMCTL_CONFIG", str(path))

        assert load_config().timeout == 3.0

    def test_environment_overrides_file(self, clean_env, monkeypatch):
        path = clean_env / "rmctl.yaml"
        path.write_text("controller: /from/file.sock\ntimeout: 10\n")
        monkeypatch.setenv("RMCTL_CONTROLLER", "/from/env.sock")
        monkeypatch.setenv("RMCTL_TIMEOUT", "2.5")

        config = load_config(config_file=str(path))

        assert config.controller == "/from/env.sock"
        assert config.timeout == 2.5

    def test_argument_overrides_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("RMCTL_CONTROLLER", "/from/env.sock")
        monkeypatch.setenv("RMCTL_BACKUP_CONTROLLER", "/from/env-backup.sock")

        config = load_config(controller="/from/arg.sock", backup_controller="/arg-backup.sock")

        assert config.controller == "/from/arg.sock"
        assert config.backup_controller == "/arg-backup.sock"

    def test_rmctl_all_set_to_anything(self, clean_env, monkeypatch):
        monkeypatch.setenv("RMCTL_ALL", "")

        assert load_config().show_all is True

    def test_env_local_file(self, clean_env):
        (clean_env / ".env.local").write_text("RMCTL_CONTROLLER=/from/dotenv.sock\n")

        with patch.dict(os.environ):
            assert load_config().controller == "/from/dotenv.sock"

    def test_invalid_timeout(self, clean_env, monkeypatch):
        monkeypatch.setenv("RMCTL_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="Invalid timeout"):
            load_config()

    def test_missing_explicit_file(self, clean_env):
        with pytest.raises(FileNotFoundError):
            load_config(config_file=str(clean_env / "missing.yaml"))

    def test_file_must_hold_mapping(self, clean_env):
        path = clean_env / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(config_file=str(path))
