"""
Bounded-concurrency sweep over discovered directories.

discover -> sort -> one task per directory behind a semaphore -> gather ->
reduce outcomes into a SweepSummary.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional, Union

from quick_pipreqs.config import (
    DEFAULT_CONCURRENCY,
    MARKER_FILE,
    MAX_CONCURRENCY,
    MIN_CONCURRENCY,
    SweepConfig,
    get_config,
)
from quick_pipreqs.errors import RegenerationError, SetupError, UsageError
from quick_pipreqs.preflight import check_environment
from quick_pipreqs.processor import ProcessingOutcome, process_directory
from quick_pipreqs.progress import (
    NullRenderer,
    ProgressState,
    ProgressTracker,
    Renderer,
    report_progress,
)
from quick_pipreqs.scanner import find_requirements_dirs, resolve_root

logger = logging.getLogger(__name__)

ProcessFunc = Callable[..., Awaitable[ProcessingOutcome]]


@dataclass
class SweepSummary:
    """Aggregate counts for a finished sweep.

    Attributes:
        processed: Directories dispatched
        updated: Directories whose requirements.txt changed
        errors: Directories that failed
        skipped: Directories cancelled before they started
        failures: Outcomes of the failed directories, in dispatch order
    """
    processed: int = 0
    updated: int = 0
    errors: int = 0
    skipped: int = 0
    failures: list[ProcessingOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[Optional[ProcessingOutcome]]) -> "SweepSummary":
        """Reduce per-directory outcomes; ``None`` marks a skipped directory."""
        summary = cls()
        for outcome in outcomes:
            summary.processed += 1
            if outcome is None:
                summary.skipped += 1
            elif outcome.failed:
                summary.errors += 1
                summary.failures.append(outcome)
            elif outcome.changed:
                summary.updated += 1
        return summary

    def summary_line(self) -> str:
        return f"processed: {self.processed} updated: {self.updated} errors: {self.errors}"

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "updated": self.updated,
            "errors": self.errors,
            "skipped": self.skipped,
            "failures": [str(o.directory) for o in self.failures],
        }


def clamp_concurrency(value: int) -> int:
    """
    Validate a requested worker count.

    Raises:
        UsageError: If ``value`` is below 1. Values above the cap are
            silently reduced to it.
    """
    if value < MIN_CONCURRENCY:
        raise UsageError(f"invalid --concurrency: {value} (must be >= {MIN_CONCURRENCY})")
    return min(value, MAX_CONCURRENCY)


def order_directories(directories: Iterable[Path]) -> list[Path]:
    """Deduplicate and sort lexicographically by path string."""
    return sorted(set(directories), key=str)


def discover(
    root: Union[str, Path],
    max_depth: int,
    on_fallback: Optional[Callable[[Path], None]] = None,
) -> list[Path]:
    """
    Find target directories under ``root`` in dispatch order.

    Falls back to the root itself when no directory holds a requirements.txt,
    calling ``on_fallback`` with the root so the caller can announce it.

    Raises:
        ScanError: If the root is invalid or the walk fails
    """
    root_abs = resolve_root(root)
    found = find_requirements_dirs(root_abs, max_depth)
    if not found:
        logger.debug(f"no {MARKER_FILE} found; running in root: {root_abs}")
        if on_fallback is not None:
            on_fallback(root_abs)
        return [root_abs]
    return order_directories(found)


def ensure_command_available(config: SweepConfig) -> None:
    """
    Raises:
        SetupError: If the external command is not on PATH
    """
    result = check_environment(config, dry_run=False)
    if not result.is_valid:
        raise SetupError("; ".join(result.missing_required))
    logger.debug(f"Using {result.command} at {result.resolved_path}")


def _install_signal_handlers(cancel: asyncio.Event) -> list[int]:
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel.set)
        except (NotImplementedError, RuntimeError, ValueError):
            continue
        installed.append(sig)
    return installed


def _remove_signal_handlers(installed: list[int]) -> None:
    loop = asyncio.get_running_loop()
    for sig in installed:
        loop.remove_signal_handler(sig)


async def run_sweep(
    directories: Iterable[Path],
    root: Path,
    concurrency: int = DEFAULT_CONCURRENCY,
    dry_run: bool = False,
    config: Optional[SweepConfig] = None,
    renderer: Optional[Renderer] = None,
    cancel: Optional[asyncio.Event] = None,
    process: ProcessFunc = process_directory,
    handle_signals: bool = False,
) -> SweepSummary:
    """
    Regenerate every directory with at most ``concurrency`` running at once.

    Directories are dispatched in sorted order; completion order is not
    fixed. Once ``cancel`` is set, directories that have not started are
    skipped. Running commands are never interrupted.

    Args:
        directories: Target directories
        root: Sweep root, used for display paths
        concurrency: Requested worker count (clamped to the cap)
        dry_run: Skip all file mutation and command invocation
        config: Sweep config (defaults to the global one)
        renderer: Progress renderer (defaults to drawing nothing)
        cancel: Event that stops not-yet-started directories
        process: Per-directory coroutine
        handle_signals: Wire SIGINT/SIGTERM to ``cancel``

    Returns:
        SweepSummary of all outcomes

    Raises:
        UsageError: If concurrency is below 1
        SetupError: If the external command is missing in a live run
    """
    concurrency = clamp_concurrency(concurrency)
    config = config or get_config()
    if not dry_run:
        ensure_command_available(config)

    dirs = order_directories(directories)
    tracker = ProgressTracker(dirs, root)
    cancel = cancel or asyncio.Event()
    stop = asyncio.Event()
    semaphore = asyncio.Semaphore(concurrency)

    logger.debug(f"Dispatching {len(dirs)} directories (concurrency={concurrency}, dry_run={dry_run})")

    async def bounded(directory: Path) -> Optional[ProcessingOutcome]:
        async with semaphore:
            if cancel.is_set():
                return None
            tracker.set_state(directory, ProgressState.ACTIVE)
            try:
                return await process(directory, dry_run=dry_run, config=config)
            finally:
                tracker.set_state(directory, ProgressState.DONE)

    installed = _install_signal_handlers(cancel) if handle_signals else []
    reporter = asyncio.create_task(
        report_progress(tracker, renderer or NullRenderer(), stop, config.refresh_interval)
    )
    try:
        results = await asyncio.gather(*(bounded(d) for d in dirs), return_exceptions=True)
    finally:
        cancel.set()
        stop.set()
        await reporter
        _remove_signal_handlers(installed)

    outcomes: list[Optional[ProcessingOutcome]] = []
    for directory, result in zip(dirs, results):
        if isinstance(result, asyncio.CancelledError):
            outcomes.append(None)
        elif isinstance(result, BaseException):
            logger.debug(f"Unexpected error processing {directory}: {result!r}")
            error = RegenerationError(directory, f"unexpected error: {result}")
            outcomes.append(ProcessingOutcome(directory=directory, error=error))
        else:
            outcomes.append(result)

    summary = SweepSummary.from_outcomes(outcomes)
    if summary.errors:
        logger.info(f"{summary.errors} of {summary.processed} directories failed")
    return summary
