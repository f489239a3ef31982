"""Disposability heuristics applied to each file found during a scan.

Rules are evaluated in order and the first match wins:

1. Extension: the suffix is one of the well-known temporary/log/backup types.
2. Path fragment: the containing directory, anchored at the scan root's own
   directory name, contains a temp or cache path segment.
3. Stale download: inside a downloads root, the file is older than 30 days
   and smaller than 10 MiB.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import PurePath
from typing import Final

from tempsweep.types.models import MatchReason

DISPOSABLE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".tmp",
        ".log",
        ".cache",
        ".bak",
        ".old",
        ".crdownload",
        ".part",
        ".dmp",
    }
)

# Matched against "/"-separated, lower-cased directory paths
TEMP_PATH_FRAGMENTS: Final[tuple[str, ...]] = ("/temp", "/tmp", "/cache")

STALE_DOWNLOAD_AGE: Final[timedelta] = timedelta(days=30)
STALE_DOWNLOAD_MAX_BYTES: Final[int] = 10 * 1024 * 1024

DEFAULT_DOWNLOAD_CATEGORIES: Final[tuple[str, ...]] = ("Downloads",)


def has_disposable_extension(name: str) -> bool:
    """Check whether a file name ends in a disposable extension (case-insensitive)."""
    return PurePath(name).suffix.lower() in DISPOSABLE_EXTENSIONS


def is_under_temp_path(directory: str) -> bool:
    """Check whether a directory path contains a temp or cache segment.

    Args:
        directory: Directory path with either separator style

    Returns:
        True if any temp/cache fragment occurs in the path

    Examples:
        >>> is_under_temp_path("Temp/installer")
        True
        >>> is_under_temp_path("/home/user/.cache/thumbnails")
        False
        >>> is_under_temp_path("/home/user/cache")
        True
    """
    if not directory:
        return False
    normalized = "/" + directory.replace("\\", "/").lower()
    return any(fragment in normalized for fragment in TEMP_PATH_FRAGMENTS)


def is_stale_small_download(
    size: int,
    last_modified: datetime,
    now: datetime,
) -> bool:
    """Check the stale-download rule: older than 30 days and under 10 MiB."""
    return last_modified < now - STALE_DOWNLOAD_AGE and size < STALE_DOWNLOAD_MAX_BYTES


class Classifier:
    """Decides whether a file observed under a candidate root is disposable."""

    download_categories: frozenset[str]

    def __init__(self, download_categories: Iterable[str] = DEFAULT_DOWNLOAD_CATEGORIES) -> None:
        """Initialize the classifier.

        Args:
            download_categories: Root categories treated as downloads locations
        """
        self.download_categories = frozenset(c.casefold() for c in download_categories)

    def classify(
        self,
        *,
        name: str,
        anchored_directory: str,
        size: int,
        last_modified: datetime,
        category: str,
        now: datetime,
    ) -> MatchReason | None:
        """Return the first matching rule for a file, or None if it must be kept.

        Args:
            name: File name including extension
            anchored_directory: Containing directory relative to the scan root's
                parent, so it starts with the root's own directory name
            size: File size in bytes
            last_modified: Modification time of the file
            category: Category of the root the file was found under
            now: Reference time for the stale-download rule

        Returns:
            The matching MatchReason, or None when no rule applies
        """
        if has_disposable_extension(name):
            return MatchReason.EXTENSION

        if is_under_temp_path(anchored_directory):
            return MatchReason.PATH_FRAGMENT

        if category.casefold() in self.download_categories and is_stale_small_download(
            size, last_modified, now
        ):
            return MatchReason.STALE_DOWNLOAD

        return None
