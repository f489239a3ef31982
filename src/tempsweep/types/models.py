"""Data models for tempsweep.

This module defines immutable dataclasses used to pass scan and deletion
results between the locator, scanner, remover and their callers.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import override


class MatchReason(str, Enum):
    """Disposability rule that caused a file to be reported."""

    EXTENSION = "extension"
    PATH_FRAGMENT = "path_fragment"
    STALE_DOWNLOAD = "stale_download"


class DeletionOutcome(str, Enum):
    """Outcome of a single file deletion attempt."""

    DELETED = "deleted"
    MISSING = "missing"
    FAILED = "failed"


class OperationStatus(str, Enum):
    """End state of a scan or delete invocation."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class CandidateRoot:
    """Directory to scan, tagged with a free-form category label."""

    path: str
    category: str


@dataclass(slots=True, frozen=True, eq=False)
class FoundFile:
    """Immutable record of a disposable file observed during a scan.

    ``size`` and ``last_modified`` are a snapshot taken at scan time and may
    be stale by the time the file is deleted. Identity is the path, compared
    with the host's case convention (``os.path.normcase``).
    """

    path: str
    size: int
    last_modified: datetime
    category: str
    reason: MatchReason = field(default=MatchReason.EXTENSION)

    @property
    def key(self) -> str:
        """Normalized path used for identity comparisons."""
        return os.path.normcase(self.path)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FoundFile):
            return NotImplemented
        return self.key == other.key

    @override
    def __hash__(self) -> int:
        return hash(self.key)


@dataclass(slots=True, frozen=True)
class DeletionResult:
    """Per-file result of a deletion attempt.

    ``bytes_freed`` holds the size observed immediately before the file was
    removed; it is zero for missing or failed files.
    """

    path: str
    outcome: DeletionOutcome
    bytes_freed: int = 0
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ScanReport:
    """Outcome of a background scan."""

    status: OperationStatus
    files: list[FoundFile]
    error: BaseException | None = None

    @property
    def total_bytes(self) -> int:
        return sum(f.size for f in self.files)


@dataclass(slots=True, frozen=True)
class DeleteReport:
    """Outcome of a background deletion."""

    status: OperationStatus
    bytes_freed: int
    error: BaseException | None = None
