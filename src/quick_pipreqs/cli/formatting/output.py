#!/usr/bin/env python
"""
Output formatting with Rich console.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from quick_pipreqs.processor import ProcessingOutcome


custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting.

    Regular output goes to stdout, errors to stderr.
    """

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console(theme=custom_theme)
        self.err_console = err_console or Console(theme=custom_theme, stderr=True)

    def print(self, text: str = "", **kwargs):
        """Print text to console."""
        self.console.print(text, **kwargs)

    def print_plain(self, text: str):
        """Print text with no markup or highlighting (paths, versions)."""
        self.console.print(text, markup=False, highlight=False)

    def print_error(self, text: str):
        """Print error text to stderr."""
        self.err_console.print(Text.assemble(("error: ", "error"), str(text)))

    def print_warning(self, text: str):
        """Print warning text."""
        self.console.print(f"[warning]Warning:[/warning] {text}")

    def print_dim(self, text: str):
        """Print dimmed text."""
        self.console.print(f"[dim]{text}[/dim]")

    def print_failures(self, failures: Iterable[ProcessingOutcome]):
        """Print buffered per-directory failures with their captured output."""
        for outcome in failures:
            error = outcome.error
            body = Text(str(error), style="error")
            if error is not None and error.output:
                body.append("\n\n")
                body.append(error.output.rstrip())
            self.err_console.print(
                Panel(body, title=Text(str(outcome.directory)), title_align="left", expand=False)
            )
