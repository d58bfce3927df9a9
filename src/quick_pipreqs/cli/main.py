#!/usr/bin/env python
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from quick_pipreqs.cli.formatting.output import ConsoleOutput
from quick_pipreqs.cli.formatting.progress import make_renderer
from quick_pipreqs.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_DEPTH,
    LOG_FORMAT,
    MARKER_FILE,
    MAX_CONCURRENCY,
    load_config,
)
from quick_pipreqs.errors import QuickPipreqsError, SetupError, UsageError
from quick_pipreqs.runner import clamp_concurrency, discover, run_sweep
from quick_pipreqs.scanner import resolve_root
from quick_pipreqs.version import FULL

logger = logging.getLogger("quick_pipreqs.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quick-pipreqs",
        usage="%(prog)s [options] <path>",
        description="Regenerate every requirements.txt under <path> with pipreqs, "
        "keeping the previous file as requirements.txt.bak.",
    )
    parser.add_argument("path", nargs="?", help="Root directory to scan")
    parser.add_argument("--dry-run", action="store_true", help="Print actions without executing")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum recursion depth, 0 = only root, negative = unlimited (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Max concurrent updates, 1-{MAX_CONCURRENCY} (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument("--verbose", action="store_true", help="Print verbose output")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    return parser


def make_log_handler(console: Optional[Console] = None) -> RichHandler:
    """
    Log handler writing through a stderr rich Console.

    The console resolves ``sys.stderr`` on every write, so while the live
    progress region redirects stderr, records land above the region.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(level: str, verbose: bool = False, console: Optional[Console] = None) -> None:
    logging.basicConfig(level=level, handlers=[make_log_handler(console)])
    # Keep quick_pipreqs at INFO when verbose, unless configured lower
    if verbose and logging.getLogger().getEffectiveLevel() > logging.INFO:
        logging.getLogger("quick_pipreqs").setLevel(logging.INFO)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(FULL)
        return 0

    if args.path is None:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: the following arguments are required: path", file=sys.stderr)
        return 2

    console = ConsoleOutput()

    try:
        concurrency = clamp_concurrency(args.concurrency)
    except UsageError as e:
        console.print_error(str(e))
        return e.exit_code

    load_dotenv(Path.cwd() / ".env")
    try:
        config = load_config()
    except SetupError as e:
        console.print_error(str(e))
        return e.exit_code
    configure_logging(config.log_level, verbose=args.verbose, console=console.err_console)

    try:
        root = resolve_root(args.path)
        dirs = discover(
            root,
            args.max_depth,
            on_fallback=lambda r: console.print_plain(
                f"no {MARKER_FILE} found; running {config.command} in root: {r}"
            ),
        )
    except QuickPipreqsError as e:
        console.print_error(str(e))
        return e.exit_code

    console.print(f"discovered {len(dirs)} directories to process")
    if args.verbose:
        for d in dirs:
            console.print_plain(f" - {d}")

    renderer = make_renderer(console.console, config.active_lines)
    try:
        summary = asyncio.run(
            run_sweep(
                dirs,
                root,
                concurrency=concurrency,
                dry_run=args.dry_run,
                config=config,
                renderer=renderer,
                handle_signals=True,
            )
        )
    except QuickPipreqsError as e:
        console.print_error(str(e))
        return e.exit_code

    console.print_failures(summary.failures)
    if summary.skipped:
        console.print_warning(f"{summary.skipped} directories skipped after interrupt")
    if args.dry_run:
        console.print_dim("dry run: no files were changed")
    console.print(summary.summary_line())
    return 0


if __name__ == "__main__":
    sys.exit(main())
