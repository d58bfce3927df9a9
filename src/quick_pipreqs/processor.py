"""
Regenerate the requirements.txt of a single directory.

Backs up the current file, runs the external command in the directory and
compares content hashes before and after to report whether it changed.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from quick_pipreqs.config import BACKUP_SUFFIX, MARKER_FILE, SweepConfig, get_config
from quick_pipreqs.errors import RegenerationError
from quick_pipreqs.hashing import file_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingOutcome:
    """Result of processing one directory."""

    directory: Path
    changed: bool = False
    error: Optional[RegenerationError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def get_backup_path(file_path: Path) -> Path:
    """
    Get the backup file path for a given file.

    Args:
        file_path: Original file path

    Returns:
        Backup file path (original + .bak)
    """
    return file_path.with_name(file_path.name + BACKUP_SUFFIX)


def is_changed(pre_exists: bool, pre_hash: Optional[str], post_exists: bool, post_hash: Optional[str]) -> bool:
    """True if the file appeared, or existed both times with different content."""
    if not post_exists:
        return False
    if not pre_exists:
        return True
    return pre_hash != post_hash


async def run_command(argv: Sequence[str], cwd: Path) -> tuple[int, str]:
    """
    Run ``argv`` in ``cwd`` and capture stdout and stderr combined.

    Returns:
        (exit code, decoded output)

    Raises:
        OSError: If the executable cannot be launched
    """
    proc = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd),
        env=os.environ.copy(),
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        # own session: a terminal Ctrl-C reaches only our loop, not the child
        start_new_session=True,
    )
    stdout, _ = await proc.communicate()
    output = stdout.decode(errors="replace") if stdout else ""
    return proc.returncode, output


async def update_requirements(
    directory: Path,
    dry_run: bool = False,
    config: Optional[SweepConfig] = None,
) -> bool:
    """
    Back up and regenerate ``directory``'s requirements.txt.

    Args:
        directory: Directory to regenerate
        dry_run: If True, touch nothing and report unchanged
        config: Sweep config (defaults to the global one)

    Returns:
        True if the file's content changed

    Raises:
        RegenerationError: If backing up fails or the command fails. The
            backup is left in place.
    """
    if dry_run:
        return False

    config = config or get_config()
    req_path = directory / MARKER_FILE
    backup_path = get_backup_path(req_path)

    pre_exists = False
    pre_hash = None
    try:
        if req_path.exists():
            pre_exists = True
            pre_hash = await file_hash(req_path)
            # overwrite semantics: drop any older backup first
            backup_path.unlink(missing_ok=True)
            os.replace(req_path, backup_path)
    except OSError as e:
        raise RegenerationError(directory, f"backup of {req_path} failed: {e}") from e

    try:
        returncode, output = await run_command(config.argv, directory)
    except OSError as e:
        raise RegenerationError(directory, f"{config.command} could not be started: {e}") from e

    logger.debug(f"{config.command} exited {returncode} in {directory}")
    if returncode != 0:
        raise RegenerationError(
            directory,
            f"{config.command} failed with exit code {returncode}",
            returncode=returncode,
            output=output,
        )

    try:
        post_hash = await file_hash(req_path)
    except OSError as e:
        raise RegenerationError(directory, f"could not read regenerated {req_path}: {e}") from e
    post_exists = post_hash is not None

    return is_changed(pre_exists, pre_hash, post_exists, post_hash)


async def process_directory(
    directory: Path,
    dry_run: bool = False,
    config: Optional[SweepConfig] = None,
) -> ProcessingOutcome:
    """Run ``update_requirements`` and fold any failure into the outcome."""
    try:
        changed = await update_requirements(directory, dry_run=dry_run, config=config)
    except RegenerationError as e:
        # reported after the progress display is torn down
        logger.debug(f"Regeneration failed for {directory}: {e}")
        return ProcessingOutcome(directory=directory, error=e)
    return ProcessingOutcome(directory=directory, changed=changed)
