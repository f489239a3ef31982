"""Application entry point and CLI for tempsweep.

This module is a thin caller of the core: it parses command-line arguments,
loads configuration, sets up logging, resolves candidate roots, runs the
scan (and optionally the deletion) in the background, and maps the outcome
to an exit code. Ctrl+C cancels the running operation cooperatively and the
partial result is still reported.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
import time
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import NoReturn, TextIO

from tempsweep.core.cancellation import CancellationToken
from tempsweep.core.classifier import Classifier
from tempsweep.core.config import (
    ConfigurationError,
    MainConfig,
    load_main_config,
)
from tempsweep.core.locator import resolve_candidates
from tempsweep.core.runner import delete_async, scan_async
from tempsweep.core.scanner import FileScanner
from tempsweep.types.aliases import CandidateList, ProgressCallback
from tempsweep.types.models import CandidateRoot, FoundFile, OperationStatus
from tempsweep.utils.formatting import format_duration, format_size
from tempsweep.utils.logging import configure_logging

__all__ = ["main"]

DEFAULT_EXTRA_CATEGORY = "Custom"

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 1
EXIT_CANCELLED = 130


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for tempsweep.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    CLI Arguments:
        --config, -c: Path to YAML configuration file
        --log-level: Override log level from config
        --root: Extra directory to scan, optionally PATH=CATEGORY (repeatable)
        --category: Only scan roots with this category (repeatable)
        --limit: Show at most this many files
        --delete: Delete every file found instead of only listing them
    """
    parser = argparse.ArgumentParser(
        prog="tempsweep",
        description="Find disposable temp, cache and stale download files, largest first",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tempsweep
  tempsweep --category Downloads --limit 20
  tempsweep --root ~/build-cache=Build --delete
  tempsweep --config tempsweep.yaml --log-level DEBUG
        """,
    )

    _ = parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: built-in settings)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration",
        metavar="LEVEL",
    )

    _ = parser.add_argument(
        "--root",
        action="append",
        default=[],
        help=f"Extra directory to scan as PATH or PATH=CATEGORY (default category: {DEFAULT_EXTRA_CATEGORY})",
        metavar="PATH[=CATEGORY]",
    )

    _ = parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Only scan roots in this category (repeatable)",
        metavar="NAME",
    )

    _ = parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Show at most N files",
        metavar="N",
    )

    _ = parser.add_argument(
        "--delete",
        action="store_true",
        help="Permanently delete every file found (no trash, no undo)",
    )

    return parser.parse_args(argv)


def parse_root_argument(value: str) -> CandidateRoot:
    """Parse a ``--root`` value of the form PATH or PATH=CATEGORY.

    Example:
        >>> parse_root_argument("/srv/build=Build")
        CandidateRoot(path='/srv/build', category='Build')
    """
    path, sep, category = value.rpartition("=")
    if not sep or not path:
        path, category = value, DEFAULT_EXTRA_CATEGORY
    return CandidateRoot(
        path=str(Path(path).expanduser()),
        category=category.strip() or DEFAULT_EXTRA_CATEGORY,
    )


def progress_printer(label: str, stream: TextIO = sys.stderr) -> ProgressCallback:
    """Build a progress sink that rewrites a single percentage line."""

    def report(value: float) -> None:
        _ = stream.write(f"\r{label} {value * 100:5.1f}%")
        if value >= 1.0:
            _ = stream.write("\n")
        stream.flush()

    return report


def render_files(files: Sequence[FoundFile], limit: int | None = None) -> Iterator[str]:
    """Yield one display line per file plus a total line."""
    shown = files if limit is None else files[:limit]
    for found in shown:
        yield f"{format_size(found.size):>10}  {found.category:<14} {found.reason.value:<15} {found.path}"
    if len(shown) < len(files):
        yield f"... {len(files) - len(shown)} more"
    yield f"{len(files)} files, {format_size(sum(f.size for f in files))} total"


@contextlib.contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Cancel ``token`` on SIGINT/SIGTERM while the block runs."""
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, token.cancel)
        except NotImplementedError:
            # Event loops without signal support (e.g. Windows proactor)
            continue
        installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            _ = loop.remove_signal_handler(sig)


async def async_main(
    *,
    config: MainConfig,
    extra_roots: CandidateList = (),
    categories: Sequence[str] = (),
    limit: int | None = None,
    delete: bool = False,
) -> OperationStatus:
    """Resolve roots, scan them and optionally delete what was found.

    Args:
        config: Validated configuration
        extra_roots: Roots given on the command line
        categories: Category filter given on the command line
        limit: Maximum number of files to list
        delete: Delete every file found after listing

    Returns:
        End state of the last operation that ran
    """
    logger = logging.getLogger(__name__)

    candidates = resolve_candidates([*config.scan.candidate_roots(), *extra_roots])
    if categories:
        config.scan.categories = list(categories)
    candidates = config.scan.select(candidates)
    logger.info("Scanning roots", extra={"roots": [c.path for c in candidates]})

    scanner = FileScanner(Classifier(config.scan.download_categories))
    token = CancellationToken()

    started = time.monotonic()
    with cancel_on_interrupt(token):
        report = await scan_async(candidates, token, progress_printer("Scanning"), scanner=scanner)
    logger.info(
        "Scan returned",
        extra={"status": report.status.value, "elapsed": format_duration(time.monotonic() - started)},
    )

    if report.status is OperationStatus.FAILED:
        raise RuntimeError(f"Scan failed: {report.error}")

    for line in render_files(report.files, limit):
        print(line)

    if report.status is OperationStatus.CANCELLED:
        print("Scan cancelled; results above are partial.", file=sys.stderr)
        return report.status

    if not delete or not report.files:
        return report.status

    with cancel_on_interrupt(token):
        deletion = await delete_async(report.files, token, progress_printer("Deleting"))

    if deletion.status is OperationStatus.FAILED:
        raise RuntimeError(f"Deletion failed: {deletion.error}")

    if deletion.status is OperationStatus.CANCELLED:
        print(f"Deletion cancelled after freeing {format_size(deletion.bytes_freed)}.")
    else:
        print(f"Freed {format_size(deletion.bytes_freed)}.")
    return deletion.status


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Main entry point for tempsweep.

    Exit Codes:
        0: Completed
        1: Configuration error or runtime error
        130: Cancelled by the user
    """
    args = parse_arguments(argv)

    # Extract args with type annotations to avoid reportAny at argparse boundary
    config_path_arg: Path | None = args.config  # pyright: ignore[reportAny]  # argparse boundary
    log_level_arg: str | None = args.log_level  # pyright: ignore[reportAny]  # argparse boundary
    root_args: list[str] = args.root  # pyright: ignore[reportAny]  # argparse boundary
    category_args: list[str] = args.category  # pyright: ignore[reportAny]  # argparse boundary
    limit_arg: int | None = args.limit  # pyright: ignore[reportAny]  # argparse boundary
    delete_arg: bool = args.delete  # pyright: ignore[reportAny]  # argparse boundary

    try:
        config = load_main_config(config_path_arg) if config_path_arg is not None else MainConfig()
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    if log_level_arg is not None:
        config.application.log_level = log_level_arg

    configure_logging(
        log_level=config.application.log_level,
        enable_syslog=config.application.syslog_enabled,
        enable_console=True,
    )

    try:
        status = asyncio.run(
            async_main(
                config=config,
                extra_roots=[parse_root_argument(r) for r in root_args],
                categories=category_args,
                limit=limit_arg,
                delete=delete_arg,
            )
        )

    except RuntimeError as exc:
        print(f"Runtime error: {exc}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)

    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        sys.exit(EXIT_CANCELLED)

    if status is OperationStatus.CANCELLED:
        sys.exit(EXIT_CANCELLED)
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
