"""Runtime configuration for quick-pipreqs.

Values come from, in increasing priority: built-in defaults, the optional
``~/.quick-pipreqs/config.yaml`` file (``quick_pipreqs:`` section), and
``QUICK_PIPREQS_*`` environment variables. Command-line flags are applied on
top by the CLI and never stored here.
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from quick_pipreqs.config.defaults import (
    ACTIVE_LINES,
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    CONFIG_SECTION,
    DEFAULT_COMMAND,
    DEFAULT_COMMAND_ARGS,
    DEFAULT_LOG_LEVEL,
    ENV_PREFIX,
    REFRESH_INTERVAL_SECONDS,
)
from quick_pipreqs.errors import SetupError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class SweepConfig:
    """Configuration for a sweep over a directory tree."""

    # External regeneration command, run once per directory
    command: str = DEFAULT_COMMAND
    command_args: tuple[str, ...] = field(default=DEFAULT_COMMAND_ARGS)

    # Progress display
    refresh_interval: float = REFRESH_INTERVAL_SECONDS
    active_lines: int = ACTIVE_LINES

    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if not self.command:
            raise SetupError("command must not be empty")
        if self.refresh_interval <= 0:
            raise SetupError(f"refresh_interval must be > 0, got {self.refresh_interval}")
        if self.active_lines < 1:
            raise SetupError(f"active_lines must be >= 1, got {self.active_lines}")
        self.command_args = tuple(self.command_args)
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise SetupError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SweepConfig":
        """Create config from a mapping, ignoring unknown keys."""
        kwargs: dict[str, Any] = {}
        if "command" in data:
            kwargs["command"] = str(data["command"])
        if "command_args" in data:
            kwargs["command_args"] = _split_args(data["command_args"])
        if "refresh_interval" in data:
            kwargs["refresh_interval"] = _as_number(float, "refresh_interval", data["refresh_interval"])
        if "active_lines" in data:
            kwargs["active_lines"] = _as_number(int, "active_lines", data["active_lines"])
        if "log_level" in data:
            kwargs["log_level"] = str(data["log_level"])
        return cls(**kwargs)

    @classmethod
    def from_env(cls, base: Optional["SweepConfig"] = None) -> "SweepConfig":
        """Create config from environment variables layered over ``base``."""
        base = base or cls()
        overrides: dict[str, Any] = {}

        command = os.environ.get(f"{ENV_PREFIX}COMMAND")
        if command:
            overrides["command"] = command
        args = os.environ.get(f"{ENV_PREFIX}ARGS")
        if args is not None:
            overrides["command_args"] = _split_args(args)
        interval = os.environ.get(f"{ENV_PREFIX}REFRESH_INTERVAL")
        if interval:
            overrides["refresh_interval"] = _as_number(float, f"{ENV_PREFIX}REFRESH_INTERVAL", interval)
        lines = os.environ.get(f"{ENV_PREFIX}ACTIVE_LINES")
        if lines:
            overrides["active_lines"] = _as_number(int, f"{ENV_PREFIX}ACTIVE_LINES", lines)
        level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
        if level:
            overrides["log_level"] = level

        return replace(base, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML/JSON serialization."""
        return {
            "command": self.command,
            "command_args": list(self.command_args),
            "refresh_interval": self.refresh_interval,
            "active_lines": self.active_lines,
            "log_level": self.log_level,
        }

    @property
    def argv(self) -> list[str]:
        """Full argument vector for the external command."""
        return [self.command, *self.command_args]


def _split_args(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return tuple(shlex.split(str(value)))


def _as_number(kind, name: str, value: Any):
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise SetupError(f"Invalid value for {name}: {value!r}") from e


def default_config_path() -> Path:
    """Return ``~/.quick-pipreqs/config.yaml``."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> SweepConfig:
    """Load config from the YAML file (if present) and the environment.

    The result becomes the global config returned by ``get_config``.

    Raises:
        SetupError: If the file is not valid YAML or holds invalid values.
    """
    path = path or default_config_path()
    config = SweepConfig()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SetupError(f"Could not read config file {path}: {e}") from e
        section = data.get(CONFIG_SECTION) if isinstance(data, dict) else None
        if section:
            logger.debug(f"Loaded config section from {path}")
            config = SweepConfig.from_dict(section)

    config = SweepConfig.from_env(config)
    set_config(config)
    return config


# Global config instance
_config: Optional[SweepConfig] = None


def get_config() -> SweepConfig:
    """Get global sweep config."""
    global _config
    if _config is None:
        _config = SweepConfig.from_env()
    return _config


def set_config(config: Optional[SweepConfig]) -> None:
    """Set global sweep config (``None`` resets to environment defaults)."""
    global _config
    _config = config
