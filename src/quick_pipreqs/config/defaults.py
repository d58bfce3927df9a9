"""Default configuration values for quick-pipreqs.

This module centralizes the fixed names, limits and timings used across the
package. Modules import these constants instead of hard-coding values.

Usage:
    from quick_pipreqs.config import (
        MARKER_FILE,
        MAX_CONCURRENCY,
        REFRESH_INTERVAL_SECONDS,
    )
"""

from __future__ import annotations

# =============================================================================
# Filesystem Contract
# =============================================================================

MARKER_FILE = "requirements.txt"
BACKUP_SUFFIX = ".bak"


# =============================================================================
# External Command
# =============================================================================

DEFAULT_COMMAND = "pipreqs"
DEFAULT_COMMAND_ARGS = (".",)


# =============================================================================
# Scan / Worker Pool Defaults
# =============================================================================

DEFAULT_MAX_DEPTH = 2
DEFAULT_CONCURRENCY = 12
MAX_CONCURRENCY = 12  # hard cap, larger requests are clamped
MIN_CONCURRENCY = 1  # smaller requests are a usage error


# =============================================================================
# Progress Display Defaults
# =============================================================================

REFRESH_INTERVAL_SECONDS = 0.2
ACTIVE_LINES = 6


# =============================================================================
# Logging / Config Files
# =============================================================================

DEFAULT_LOG_LEVEL = "WARNING"
# RichHandler renders time and level itself
LOG_FORMAT = "%(name)s: %(message)s"

ENV_PREFIX = "QUICK_PIPREQS_"
CONFIG_DIR_NAME = ".quick-pipreqs"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_SECTION = "quick_pipreqs"
