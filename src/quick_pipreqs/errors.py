"""Exception hierarchy for quick-pipreqs.

Usage, setup and scan errors are fatal to a run and map to process exit
codes. ``RegenerationError`` is per directory and never aborts siblings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class QuickPipreqsError(Exception):
    """Base error for the project."""

    exit_code = 1


class UsageError(QuickPipreqsError):
    """Invalid command-line usage (bad flag value, missing argument)."""

    exit_code = 2


class SetupError(QuickPipreqsError):
    """The run cannot start: bad root path, missing command, bad config."""


class ScanError(SetupError):
    """Walking the directory tree failed."""


class InvalidTransitionError(QuickPipreqsError):
    """A progress state change skipped a state or went backwards."""


class RegenerationError(QuickPipreqsError):
    """Regenerating one directory failed.

    Carries the captured command output so it can be shown after the
    progress display has been torn down.
    """

    def __init__(
        self,
        directory: Path,
        message: str,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.directory = directory
        self.returncode = returncode
        self.output = output
