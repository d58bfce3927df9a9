"""Tests for the rich-based progress region and console output."""

import logging
import sys
from io import StringIO
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from quick_pipreqs.cli.formatting.output import ConsoleOutput, custom_theme
from quick_pipreqs.cli.formatting.progress import LiveRenderer, SummaryLineRenderer, make_renderer
from quick_pipreqs.cli.main import make_log_handler
from quick_pipreqs.errors import RegenerationError
from quick_pipreqs.processor import ProcessingOutcome
from quick_pipreqs.progress import ProgressSnapshot


def _console(terminal: bool = False) -> Console:
    return Console(file=StringIO(), width=200, force_terminal=terminal, color_system=None, theme=custom_theme)


class TestLiveRenderer:
    def test_build_layout(self):
        renderer = LiveRenderer(_console(), lines=3)
        snapshot = ProgressSnapshot(waiting=4, active=1, done=2, active_dirs=["pkg/api"])

        text = renderer.build(snapshot)

        assert text.plain.split("\n") == [
            "Active: pkg/api",
            "",
            "",
            "[ 4: Waiting, 1 Active, 2 Done ]",
        ]

    def test_lifecycle_draws_final_frame(self):
        console = _console(terminal=True)
        renderer = LiveRenderer(console, lines=2)

        renderer.start()
        renderer.render(ProgressSnapshot(waiting=0, active=1, done=0, active_dirs=["a"]))
        renderer.render(ProgressSnapshot(waiting=0, active=0, done=1))
        renderer.stop()

        output = console.file.getvalue()
        assert "[ 0: Waiting, 0 Active, 1 Done ]" in output
        assert renderer.live is None

    def test_stderr_printed_above_region(self):
        """Test stderr writes during the live region go through the console."""
        console = _console(terminal=True)
        renderer = LiveRenderer(console, lines=1)
        original = sys.stderr

        renderer.start()
        try:
            print("pkg: failed", file=sys.stderr)
            renderer.render(ProgressSnapshot(done=1))
        finally:
            renderer.stop()

        assert sys.stderr is original
        assert "pkg: failed" in console.file.getvalue()

    def test_render_before_start_is_ignored(self):
        renderer = LiveRenderer(_console(), lines=2)

        renderer.render(ProgressSnapshot())
        renderer.stop()


class TestMakeRenderer:
    def test_non_terminal_gets_summary_line(self):
        assert isinstance(make_renderer(_console(terminal=False)), SummaryLineRenderer)

    def test_terminal_gets_live_renderer(self):
        renderer = make_renderer(_console(terminal=True), lines=4)

        assert isinstance(renderer, LiveRenderer)
        assert renderer.lines == 4


class TestSummaryLineRenderer:
    def test_prints_only_final_line(self):
        console = _console()
        renderer = SummaryLineRenderer(console)

        renderer.start()
        renderer.render(ProgressSnapshot(waiting=2, active=1, done=0, active_dirs=["a"]))
        assert console.file.getvalue() == ""
        renderer.render(ProgressSnapshot(waiting=0, active=0, done=3))
        renderer.stop()

        assert console.file.getvalue() == "[ 0: Waiting, 0 Active, 3 Done ]\n"

    def test_stop_without_render_prints_nothing(self):
        console = _console()
        renderer = SummaryLineRenderer(console)

        renderer.start()
        renderer.stop()

        assert console.file.getvalue() == ""


class TestLogHandler:
    def test_records_go_through_console(self):
        console = _console()
        handler = make_log_handler(console)
        log = logging.getLogger("quick_pipreqs.test_handler")
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
        log.propagate = False
        try:
            log.debug("regeneration failed for /work/bad")
        finally:
            log.removeHandler(handler)

        assert isinstance(handler, RichHandler)
        output = console.file.getvalue()
        assert "quick_pipreqs.test_handler: regeneration failed for /work/bad" in output
        assert "DEBUG" in output


class TestConsoleOutput:
    def test_print_failures(self):
        out, err = _console(), _console()
        output = ConsoleOutput(console=out, err_console=err)
        directory = Path("/work/bad")
        error = RegenerationError(directory, "pipreqs failed with exit code 3", returncode=3, output="boom\n")

        output.print_failures([ProcessingOutcome(directory, error=error)])

        text = err.file.getvalue()
        assert "/work/bad" in text
        assert "pipreqs failed with exit code 3" in text
        assert "boom" in text
        assert out.file.getvalue() == ""

    def test_print_error_goes_to_err_console(self):
        out, err = _console(), _console()
        output = ConsoleOutput(console=out, err_console=err)

        output.print_error("path does not exist: [x]")

        assert err.file.getvalue().strip() == "error: path does not exist: [x]"
        assert out.file.getvalue() == ""

    def test_print_plain_keeps_brackets(self):
        out = _console()
        output = ConsoleOutput(console=out, err_console=_console())

        output.print_plain(" - /work/[weird]")

        assert out.file.getvalue() == " - /work/[weird]\n"
