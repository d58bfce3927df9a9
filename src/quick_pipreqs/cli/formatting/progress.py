#!/usr/bin/env python
"""
Live progress display for a sweep.
"""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.text import Text

from quick_pipreqs.config import ACTIVE_LINES
from quick_pipreqs.progress import ProgressSnapshot, Renderer, format_lines, format_summary


class LiveRenderer:
    """
    Fixed-height progress region redrawn in place.

    Shows up to ``lines`` active directories followed by the
    Waiting/Active/Done summary. Rich owns the cursor movement, so the region
    is erased and redrawn without scrolling other output.
    """

    def __init__(self, console: Optional[Console] = None, lines: int = ACTIVE_LINES):
        self.console = console or Console()
        self.lines = lines
        self.live: Optional[Live] = None

    def start(self) -> None:
        self.live = Live(
            Text(""),
            console=self.console,
            auto_refresh=False,
            transient=False,
            redirect_stdout=False,
            # log records written to stderr are printed above the region
            redirect_stderr=True,
        )
        self.live.start()

    def render(self, snapshot: ProgressSnapshot) -> None:
        if self.live:
            self.live.update(self.build(snapshot), refresh=True)

    def build(self, snapshot: ProgressSnapshot) -> Text:
        rows = format_lines(snapshot, self.lines)
        text = Text()
        for row in rows[:-1]:
            if row:
                text.append("Active: ", style="cyan")
                text.append(row[len("Active: "):])
            text.append("\n")
        text.append(rows[-1], style="bold")
        return text

    def stop(self) -> None:
        # final frame stays on screen, rich adds the trailing newline
        if self.live:
            self.live.stop()
            self.live = None


class SummaryLineRenderer:
    """
    Renderer for non-interactive output.

    Draws nothing while the sweep runs and prints only the final
    Waiting/Active/Done line when stopped.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.last: Optional[ProgressSnapshot] = None

    def start(self) -> None:
        self.last = None

    def render(self, snapshot: ProgressSnapshot) -> None:
        self.last = snapshot

    def stop(self) -> None:
        if self.last is not None:
            self.console.print(format_summary(self.last), markup=False, highlight=False)


def make_renderer(console: Console, lines: int = ACTIVE_LINES) -> Renderer:
    """LiveRenderer on an interactive terminal, otherwise a SummaryLineRenderer."""
    if console.is_terminal:
        return LiveRenderer(console, lines)
    return SummaryLineRenderer(console)
