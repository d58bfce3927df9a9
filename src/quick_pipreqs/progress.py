"""Progress tracking for concurrent directory processing.

``ProgressTracker`` is the shared state written by workers and read by the
reporter. ``report_progress`` is the reporter task: it wakes on a timer and
hands a snapshot to a ``Renderer``. Rendering is advisory; a failing renderer
never affects processing.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Protocol

from quick_pipreqs.config import ACTIVE_LINES, REFRESH_INTERVAL_SECONDS
from quick_pipreqs.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class ProgressState(Enum):
    """State of a directory in the sweep."""
    WAITING = "waiting"
    ACTIVE = "active"
    DONE = "done"


# Only forward, one step at a time
_NEXT_STATE = {
    ProgressState.WAITING: ProgressState.ACTIVE,
    ProgressState.ACTIVE: ProgressState.DONE,
}


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time copy of the tracker, safe to render without the lock."""
    waiting: int = 0
    active: int = 0
    done: int = 0
    active_dirs: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.waiting + self.active + self.done


class ProgressTracker:
    """Tracks the state of every discovered directory.

    All reads and writes go through one lock, held only for the copy or the
    update itself.
    """

    def __init__(self, dirs: Iterable[Path], root: Path):
        self.root = root
        self._states: dict[Path, ProgressState] = {d: ProgressState.WAITING for d in dirs}
        self._lock = threading.Lock()

    def set_state(self, directory: Path, state: ProgressState) -> None:
        """Move ``directory`` to ``state``.

        Raises:
            InvalidTransitionError: If the directory is unknown or the move
                is not the next step of WAITING -> ACTIVE -> DONE
        """
        with self._lock:
            current = self._states.get(directory)
            if current is None:
                raise InvalidTransitionError(f"unknown directory: {directory}")
            if _NEXT_STATE.get(current) is not state:
                raise InvalidTransitionError(
                    f"{directory}: cannot move from {current.value} to {state.value}"
                )
            self._states[directory] = state
        logger.debug(f"{directory} -> {state.value}")

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            items = list(self._states.items())

        waiting = active = done = 0
        active_dirs = []
        for directory, state in items:
            if state is ProgressState.WAITING:
                waiting += 1
            elif state is ProgressState.ACTIVE:
                active += 1
                active_dirs.append(directory)
            else:
                done += 1

        return ProgressSnapshot(
            waiting=waiting,
            active=active,
            done=done,
            active_dirs=[self.relative(d) for d in sorted(active_dirs)],
        )

    def relative(self, directory: Path) -> str:
        """Path relative to root for display, absolute if that fails."""
        try:
            return os.path.relpath(directory, self.root)
        except ValueError:
            return str(directory)


def format_summary(snapshot: ProgressSnapshot) -> str:
    return f"[ {snapshot.waiting}: Waiting, {snapshot.active} Active, {snapshot.done} Done ]"


def format_lines(snapshot: ProgressSnapshot, lines: int = ACTIVE_LINES) -> list[str]:
    """Fixed-height block: ``lines`` active-directory rows plus the summary."""
    rows = [f"Active: {d}" for d in snapshot.active_dirs[:lines]]
    rows.extend("" for _ in range(lines - len(rows)))
    rows.append(format_summary(snapshot))
    return rows


class Renderer(Protocol):
    """Something that can draw a progress snapshot."""

    def start(self) -> None: ...

    def render(self, snapshot: ProgressSnapshot) -> None: ...

    def stop(self) -> None: ...


class NullRenderer:
    """Renderer for non-interactive output: draws nothing."""

    def start(self) -> None:
        pass

    def render(self, snapshot: ProgressSnapshot) -> None:
        pass

    def stop(self) -> None:
        pass


def _guarded(action: str, func, *args) -> None:
    try:
        func(*args)
    except Exception as e:
        logger.debug(f"Progress renderer {action} failed: {e}")


async def report_progress(
    tracker: ProgressTracker,
    renderer: Renderer,
    stop: asyncio.Event,
    interval: float = REFRESH_INTERVAL_SECONDS,
) -> None:
    """
    Render ``tracker`` every ``interval`` seconds until ``stop`` is set.

    Performs one final render after the stop signal, then releases the
    renderer's region.
    """
    _guarded("start", renderer.start)
    try:
        while not stop.is_set():
            _guarded("render", renderer.render, tracker.snapshot())
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
        _guarded("render", renderer.render, tracker.snapshot())
    finally:
        _guarded("stop", renderer.stop)
