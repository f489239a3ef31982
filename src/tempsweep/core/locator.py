"""Resolution of the well-known directories that hold disposable files.

Each root is resolved by an independent step. A step that fails (missing
environment variable, undeterminable home directory, ...) is skipped
without affecting the others.
"""

import logging
import os
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Final

from tempsweep.types.models import CandidateRoot

logger = logging.getLogger(__name__)

USER_TEMP: Final[str] = "User Temp"
DOWNLOADS: Final[str] = "Downloads"
WINDOWS_TEMP: Final[str] = "Windows Temp"

type RootResolver = Callable[[], str]


def _user_temp() -> str:
    return tempfile.gettempdir()


def _local_app_data_temp() -> str:
    return os.path.join(os.environ["LOCALAPPDATA"], "Temp")


def _user_downloads() -> str:
    return str(Path.home() / "Downloads")


def _windows_temp() -> str:
    windows_dir = os.environ.get("SystemRoot") or os.environ["WINDIR"]
    return os.path.join(windows_dir, "Temp")


# Resolution order; earlier entries win when two resolve to the same path
DEFAULT_RESOLVERS: Final[tuple[tuple[RootResolver, str], ...]] = (
    (_user_temp, USER_TEMP),
    (_local_app_data_temp, USER_TEMP),
    (_user_downloads, DOWNLOADS),
    (_windows_temp, WINDOWS_TEMP),
)


def normalize_candidates(candidates: Iterable[CandidateRoot]) -> list[CandidateRoot]:
    """Drop blank paths and case-insensitive duplicates, keeping first-seen order.

    Args:
        candidates: Candidate roots in resolution order

    Returns:
        New list of candidate roots with unique, non-blank paths

    Examples:
        >>> normalize_candidates([
        ...     CandidateRoot("/data/Temp", "User Temp"),
        ...     CandidateRoot("/data/temp", "Windows Temp"),
        ...     CandidateRoot("  ", "Downloads"),
        ... ])
        [CandidateRoot(path='/data/Temp', category='User Temp')]
    """
    seen: set[str] = set()
    result: list[CandidateRoot] = []
    for candidate in candidates:
        if not candidate.path or not candidate.path.strip():
            continue
        key = candidate.path.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(candidate)
    return result


def resolve_candidates(
    extra_roots: Iterable[CandidateRoot] = (),
    *,
    resolvers: Iterable[tuple[RootResolver, str]] = DEFAULT_RESOLVERS,
) -> list[CandidateRoot]:
    """Resolve the ordered list of directories to scan.

    Runs every resolver in isolation; any exception raised by one resolver
    only drops that root. Extra roots (e.g. from configuration) are appended
    after the built-in ones before duplicates and blank paths are removed.

    Args:
        extra_roots: Additional roots appended after the resolved ones
        resolvers: (resolver, category) pairs; defaults to the built-in set

    Returns:
        Deduplicated candidate roots in resolution order
    """
    resolved: list[CandidateRoot] = []

    for resolver, category in resolvers:
        try:
            path = resolver()
        except Exception as exc:
            logger.debug(
                "Candidate root could not be resolved, skipping",
                extra={"category": category, "error": repr(exc)},
            )
            continue
        resolved.append(CandidateRoot(path=path, category=category))

    resolved.extend(extra_roots)
    candidates = normalize_candidates(resolved)

    logger.info(
        "Candidate roots resolved",
        extra={"roots": [c.path for c in candidates]},
    )
    return candidates
