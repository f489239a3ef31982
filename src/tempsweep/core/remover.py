"""Best-effort deletion of previously found files.

Files are removed permanently (no trash, no undo). Every file is handled
independently: a file that vanished, is locked or cannot be removed is
recorded as such and the batch carries on. The size counted towards freed
bytes is re-read immediately before removal, not taken from the scan
snapshot.
"""

import logging
import os
import stat
from collections import Counter

from tempsweep.core.cancellation import NEVER_CANCELLED
from tempsweep.core.progress import ProgressReporter
from tempsweep.types.aliases import FoundFileList
from tempsweep.types.models import DeletionOutcome, DeletionResult, FoundFile
from tempsweep.types.protocols import CancellationSignal, ProgressSink

logger = logging.getLogger(__name__)


def delete_file(found: FoundFile) -> DeletionResult:
    """Delete a single file and report what happened.

    Args:
        found: File record from a previous scan

    Returns:
        DeletionResult with the freshly observed size when the file was
        removed, or a MISSING/FAILED outcome with zero bytes freed
    """
    path = found.path

    try:
        st = os.stat(path, follow_symlinks=False)
    except FileNotFoundError:
        return DeletionResult(path=path, outcome=DeletionOutcome.MISSING)
    except OSError as exc:
        return DeletionResult(path=path, outcome=DeletionOutcome.FAILED, error=str(exc))

    if not stat.S_ISREG(st.st_mode):
        # Replaced by a directory or link since the scan; files only
        return DeletionResult(
            path=path,
            outcome=DeletionOutcome.FAILED,
            error="not a regular file",
        )

    try:
        os.remove(path)
    except FileNotFoundError:
        return DeletionResult(path=path, outcome=DeletionOutcome.MISSING)
    except OSError as exc:
        # Permission denied, locked by another process, ...
        return DeletionResult(path=path, outcome=DeletionOutcome.FAILED, error=str(exc))

    return DeletionResult(path=path, outcome=DeletionOutcome.DELETED, bytes_freed=st.st_size)


def delete_files_detailed(
    files: FoundFileList,
    cancel: CancellationSignal = NEVER_CANCELLED,
    on_progress: ProgressSink | None = None,
) -> list[DeletionResult]:
    """Delete files in the given order and return one result per processed file.

    Cancellation is checked before each file; files after the checkpoint at
    which cancellation is observed are not attempted and have no result.

    Args:
        files: Files to delete, in the caller's selection order
        cancel: Cooperative cancellation signal
        on_progress: Receives ``processed / total`` after each file, or a
            single 1.0 when ``files`` is empty

    Returns:
        Per-file results for every file that was processed
    """
    progress = ProgressReporter(on_progress)
    total = len(files)
    results: list[DeletionResult] = []

    if total == 0:
        progress.report(1.0)
        return results

    for found in files:
        if cancel.is_cancelled:
            break

        result = delete_file(found)
        results.append(result)
        logger.debug(
            "File processed",
            extra={
                "path": result.path,
                "outcome": result.outcome.value,
                "bytes_freed": result.bytes_freed,
                "error": result.error,
            },
        )

        progress.report(len(results) / total)

    return results


def delete_files(
    files: FoundFileList,
    cancel: CancellationSignal = NEVER_CANCELLED,
    on_progress: ProgressSink | None = None,
) -> int:
    """Delete files and return the total number of bytes freed.

    Per-file failures are not raised; they only reduce the total. A
    cancelled run returns the bytes freed up to that point.

    Args:
        files: Files to delete, in the caller's selection order
        cancel: Cooperative cancellation signal
        on_progress: Receives ``processed / total`` after each file

    Returns:
        Sum of the sizes observed at delete time for files actually removed
    """
    results = delete_files_detailed(files, cancel, on_progress)
    freed = sum(r.bytes_freed for r in results if r.outcome is DeletionOutcome.DELETED)

    outcomes = Counter(r.outcome for r in results)
    logger.info(
        "Deletion finished",
        extra={
            "requested": len(files),
            "processed": len(results),
            "deleted": outcomes[DeletionOutcome.DELETED],
            "missing": outcomes[DeletionOutcome.MISSING],
            "failed": outcomes[DeletionOutcome.FAILED],
            "bytes_freed": freed,
            "cancelled": cancel.is_cancelled,
        },
    )
    return freed
