"""Preflight checks run before any directory is touched.

Verifies the external regeneration command can be found on PATH.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import Optional

from quick_pipreqs.config import SweepConfig, get_config


@dataclass
class PreflightResult:
    """Result of the preflight checks."""

    command: str
    resolved_path: Optional[str]
    dry_run: bool
    is_valid: bool
    missing_required: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command,
            "resolved_path": self.resolved_path,
            "dry_run": self.dry_run,
            "is_valid": self.is_valid,
            "missing_required": self.missing_required,
            "warnings": self.warnings,
        }


def check_environment(config: Optional[SweepConfig] = None, dry_run: bool = False) -> PreflightResult:
    """
    Check that the external command is resolvable on PATH.

    In dry-run mode the command is never invoked, so a missing command is
    only a warning.

    Returns:
        PreflightResult with the resolved command path and any problems
    """
    config = config or get_config()
    resolved = shutil.which(config.command)

    missing_required = []
    warnings = []
    if resolved is None:
        message = f"{config.command} not found in PATH"
        if dry_run:
            warnings.append(message)
        else:
            missing_required.append(message)

    return PreflightResult(
        command=config.command,
        resolved_path=resolved,
        dry_run=dry_run,
        is_valid=not missing_required,
        missing_required=missing_required,
        warnings=warnings,
    )
