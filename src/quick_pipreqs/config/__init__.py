"""Configuration constants and runtime settings for quick-pipreqs."""

from quick_pipreqs.config.defaults import (
    ACTIVE_LINES,
    BACKUP_SUFFIX,
    DEFAULT_COMMAND,
    DEFAULT_COMMAND_ARGS,
    DEFAULT_CONCURRENCY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_DEPTH,
    LOG_FORMAT,
    MARKER_FILE,
    MAX_CONCURRENCY,
    MIN_CONCURRENCY,
    REFRESH_INTERVAL_SECONDS,
)
from quick_pipreqs.config.settings import (
    SweepConfig,
    default_config_path,
    get_config,
    load_config,
    set_config,
)

__all__ = [
    "ACTIVE_LINES",
    "BACKUP_SUFFIX",
    "DEFAULT_COMMAND",
    "DEFAULT_COMMAND_ARGS",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MAX_DEPTH",
    "LOG_FORMAT",
    "MARKER_FILE",
    "MAX_CONCURRENCY",
    "MIN_CONCURRENCY",
    "REFRESH_INTERVAL_SECONDS",
    "SweepConfig",
    "default_config_path",
    "get_config",
    "load_config",
    "set_config",
]
