"""Directory scanner that collects disposable files under candidate roots.

Provides an iterative depth-first traversal that keeps going when parts of
the tree are unreadable, and classifies every regular file it reaches with
the rules in :mod:`tempsweep.core.classifier`.

Failure handling:
- Directory listing errors abandon that subtree only
- Per-file stat errors skip that file only
- Cancellation stops the walk and returns what has been collected so far
"""

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Final

from tempsweep.core.cancellation import NEVER_CANCELLED
from tempsweep.core.classifier import Classifier
from tempsweep.core.locator import normalize_candidates
from tempsweep.core.progress import ProgressReporter
from tempsweep.types.models import CandidateRoot, FoundFile
from tempsweep.types.protocols import CancellationSignal, ProgressSink

logger = logging.getLogger(__name__)

# Progress reported once the root list is known; the rest is split across roots
ROOTS_RESOLVED_PROGRESS: Final[float] = 0.3


@dataclass(slots=True)
class ScanStatistics:
    """Counters collected during one scan, used for the summary log line."""

    directories: int = 0
    files: int = 0
    unreadable_directories: int = 0
    skipped_files: int = 0


def walk_directory(
    root: str,
    cancel: CancellationSignal = NEVER_CANCELLED,
    stats: ScanStatistics | None = None,
) -> Iterator[tuple[str, list[os.DirEntry[str]]]]:
    """Walk a directory tree depth-first with an explicit stack.

    Each directory is listed once; its regular-file entries are yielded
    together with the directory's path relative to ``root`` (``"."`` for the
    root itself) and its subdirectories are pushed for later visitation.
    Symbolic links are neither followed nor yielded.

    Args:
        root: Directory to walk
        cancel: Signal polled before each directory is listed
        stats: Optional counters updated during the walk

    Yields:
        Tuples of (relative directory path, file entries in that directory)
    """
    if stats is None:
        stats = ScanStatistics()

    stack: list[str] = [root]

    while stack:
        if cancel.is_cancelled:
            return

        directory = stack.pop()

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            # Permission denied, removed mid-walk, not a directory, ...
            stats.unreadable_directories += 1
            logger.debug(
                "Cannot list directory, skipping subtree",
                extra={"path": directory, "error": str(exc)},
            )
            continue

        stats.directories += 1
        files: list[os.DirEntry[str]] = []
        subdirectories: list[str] = []

        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_file(follow_symlinks=False):
                    files.append(entry)
                elif entry.is_dir(follow_symlinks=False):
                    subdirectories.append(entry.path)
            except OSError:
                stats.skipped_files += 1
                continue

        yield os.path.relpath(directory, root), files

        stack.extend(subdirectories)


class FileScanner:
    """Scanner producing disposable-file records for a set of candidate roots."""

    classifier: Classifier
    clock: Callable[[], datetime]

    def __init__(
        self,
        classifier: Classifier | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the scanner.

        Args:
            classifier: Disposability rules; defaults to the built-in rules
            clock: Source of "now" for the stale-download rule
        """
        self.classifier = classifier or Classifier()
        self.clock = clock

    def scan(
        self,
        candidates: Iterable[CandidateRoot],
        cancel: CancellationSignal = NEVER_CANCELLED,
        on_progress: ProgressSink | None = None,
    ) -> list[FoundFile]:
        """Scan every candidate root and return disposable files, largest first.

        Cancellation is not an error: the files collected before the signal
        was observed are returned, sorted the same way as a full result.

        Args:
            candidates: Roots to scan, in order
            cancel: Cooperative cancellation signal
            on_progress: Receives non-decreasing values in [0, 1], ending at 1.0

        Returns:
            Found files sorted by size descending
        """
        progress = ProgressReporter(on_progress)
        roots = normalize_candidates(candidates)
        now = self.clock()
        stats = ScanStatistics()
        seen: set[str] = set()
        results: list[FoundFile] = []

        logger.info("Scan started", extra={"roots": len(roots)})
        progress.report(ROOTS_RESOLVED_PROGRESS)

        for index, root in enumerate(roots):
            progress.report(ROOTS_RESOLVED_PROGRESS + (1.0 - ROOTS_RESOLVED_PROGRESS) * index / len(roots))
            if cancel.is_cancelled:
                break

            for found in self.scan_root(root, cancel=cancel, now=now, stats=stats):
                if found.key in seen:
                    continue
                seen.add(found.key)
                results.append(found)

        results.sort(key=lambda f: f.size, reverse=True)
        progress.complete()

        logger.info(
            "Scan finished",
            extra={
                "found": len(results),
                "cancelled": cancel.is_cancelled,
                "directories": stats.directories,
                "files": stats.files,
                "unreadable_directories": stats.unreadable_directories,
                "skipped_files": stats.skipped_files,
            },
        )
        return results

    def scan_root(
        self,
        root: CandidateRoot,
        *,
        cancel: CancellationSignal = NEVER_CANCELLED,
        now: datetime | None = None,
        stats: ScanStatistics | None = None,
    ) -> Iterator[FoundFile]:
        """Yield disposable files under a single root in traversal order.

        Args:
            root: Candidate root to walk
            cancel: Signal polled between directories and between files
            now: Reference time for the stale-download rule (default: clock())
            stats: Optional counters updated during the walk

        Yields:
            FoundFile records tagged with the root's category
        """
        if now is None:
            now = self.clock()
        if stats is None:
            stats = ScanStatistics()

        root_path = os.path.abspath(root.path)
        if not os.path.isdir(root_path):
            logger.debug(
                "Candidate root is not a directory, skipping",
                extra={"path": root_path, "category": root.category},
            )
            return

        anchor = os.path.basename(root_path.rstrip("\\/"))

        for relative_dir, entries in walk_directory(root_path, cancel, stats):
            anchored_dir = anchor if relative_dir == "." else os.path.join(anchor, relative_dir)

            for entry in entries:
                if cancel.is_cancelled:
                    return

                stats.files += 1
                try:
                    st = entry.stat(follow_symlinks=False)
                    last_modified = datetime.fromtimestamp(st.st_mtime)
                except (OSError, OverflowError, ValueError) as exc:
                    # Vanished between listing and stat, or permission denied
                    stats.skipped_files += 1
                    logger.debug(
                        "Cannot stat file, skipping",
                        extra={"path": entry.path, "error": str(exc)},
                    )
                    continue

                reason = self.classifier.classify(
                    name=entry.name,
                    anchored_directory=anchored_dir,
                    size=st.st_size,
                    last_modified=last_modified,
                    category=root.category,
                    now=now,
                )
                if reason is None:
                    continue

                yield FoundFile(
                    path=entry.path,
                    size=st.st_size,
                    last_modified=last_modified,
                    category=root.category,
                    reason=reason,
                )


def scan(
    candidates: Iterable[CandidateRoot],
    cancel: CancellationSignal = NEVER_CANCELLED,
    on_progress: ProgressSink | None = None,
) -> list[FoundFile]:
    """Scan candidate roots with the default rules.

    Convenience wrapper around ``FileScanner().scan``.
    """
    return FileScanner().scan(candidates, cancel, on_progress)
