"""Tests for config/settings.py module."""

import os
from unittest.mock import patch

import pytest

from quick_pipreqs.config import (
    SweepConfig,
    default_config_path,
    get_config,
    load_config,
    set_config,
)
from quick_pipreqs.errors import SetupError


class TestSweepConfig:
    """Tests for SweepConfig class."""

    def test_default_values(self):
        """Test default config values."""
        config = SweepConfig()

        assert config.command == "pipreqs"
        assert config.command_args == (".",)
        assert config.refresh_interval == 0.2
        assert config.active_lines == 6
        assert config.log_level == "WARNING"

    def test_argv(self):
        config = SweepConfig(command="pipreqs", command_args=[".", "--force"])

        assert config.command_args == (".", "--force")
        assert config.argv == ["pipreqs", ".", "--force"]

    def test_log_level_normalized(self):
        assert SweepConfig(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("kwargs", [
        {"command": ""},
        {"refresh_interval": 0},
        {"refresh_interval": -1.0},
        {"active_lines": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, kwargs):
        """Test invalid values raise SetupError."""
        with pytest.raises(SetupError):
            SweepConfig(**kwargs)

    def test_from_dict(self):
        config = SweepConfig.from_dict({
            "command": "pipreqs",
            "command_args": ". --force --mode compat",
            "refresh_interval": "0.5",
            "active_lines": 3,
            "unknown": "ignored",
        })

        assert config.command_args == (".", "--force", "--mode", "compat")
        assert config.refresh_interval == 0.5
        assert config.active_lines == 3

    def test_from_dict_bad_number(self):
        with pytest.raises(SetupError, match="active_lines"):
            SweepConfig.from_dict({"active_lines": "many"})

    def test_to_dict_round_trips_through_from_dict(self):
        config = SweepConfig(command="pipreqs", command_args=(".", "--force"), active_lines=4)

        assert SweepConfig.from_dict(config.to_dict()) == config

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_defaults(self):
        """Test from_env with no environment variables."""
        assert SweepConfig.from_env() == SweepConfig()

    @patch.dict(os.environ, {
        "QUICK_PIPREQS_COMMAND": "/opt/bin/pipreqs",
        "QUICK_PIPREQS_ARGS": ". --force",
        "QUICK_PIPREQS_REFRESH_INTERVAL": "1.5",
        "QUICK_PIPREQS_ACTIVE_LINES": "10",
        "QUICK_PIPREQS_LOG_LEVEL": "info",
    }, clear=True)
    def test_from_env_with_values(self):
        """Test from_env with environment variables."""
        config = SweepConfig.from_env()

        assert config.command == "/opt/bin/pipreqs"
        assert config.command_args == (".", "--force")
        assert config.refresh_interval == 1.5
        assert config.active_lines == 10
        assert config.log_level == "INFO"

    @patch.dict(os.environ, {"QUICK_PIPREQS_ACTIVE_LINES": "3"}, clear=True)
    def test_from_env_layers_over_base(self):
        base = SweepConfig(command="custom")

        config = SweepConfig.from_env(base)

        assert config.command == "custom"
        assert config.active_lines == 3

    @patch.dict(os.environ, {"QUICK_PIPREQS_REFRESH_INTERVAL": "soon"}, clear=True)
    def test_from_env_invalid_number(self):
        with pytest.raises(SetupError, match="QUICK_PIPREQS_REFRESH_INTERVAL"):
            SweepConfig.from_env()


class TestLoadConfig:
    """Tests for load_config."""

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "config.yaml")

        assert config == SweepConfig()

    @patch.dict(os.environ, {"QUICK_PIPREQS_ACTIVE_LINES": "2"}, clear=True)
    def test_file_then_env(self, tmp_path):
        """Test environment variables override the YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "quick_pipreqs:\n"
            "  command: pipreqs\n"
            "  command_args: ['.', '--force']\n"
            "  active_lines: 8\n"
        )

        config = load_config(path)

        assert config.command_args == (".", "--force")
        assert config.active_lines == 2
        assert get_config() is config

    @patch.dict(os.environ, {}, clear=True)
    def test_file_without_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("other_tool:\n  command: nope\n")

        assert load_config(path) == SweepConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("quick_pipreqs: [unclosed\n")

        with pytest.raises(SetupError, match="Could not read config file"):
            load_config(path)

    @patch.dict(os.environ, {}, clear=True)
    def test_invalid_value_in_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("quick_pipreqs:\n  refresh_interval: 0\n")

        with pytest.raises(SetupError, match="refresh_interval"):
            load_config(path)

    def test_default_config_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        assert default_config_path() == tmp_path / ".quick-pipreqs" / "config.yaml"


class TestGlobalConfig:
    """Tests for global config functions."""

    @patch.dict(os.environ, {}, clear=True)
    def test_get_config_creates_default(self):
        config = get_config()

        assert isinstance(config, SweepConfig)
        assert get_config() is config

    def test_set_config(self):
        custom = SweepConfig(command="custom")

        set_config(custom)

        assert get_config() is custom
