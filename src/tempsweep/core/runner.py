"""Background execution of scans and deletions.

Both operations perform blocking filesystem I/O. The async functions in this
module offload each call to a worker thread with ``asyncio.to_thread`` so an
interactive caller's event loop stays responsive, and fold the outcome into
one of three end states: completed, cancelled or failed.

A fresh operation ID is set for each call; ``asyncio.to_thread`` copies the
current context, so log records emitted from the worker thread carry it.
"""

import asyncio
import logging
from collections.abc import Iterable

from tempsweep.core.cancellation import CancellationToken
from tempsweep.core.remover import delete_files
from tempsweep.core.scanner import FileScanner
from tempsweep.types.aliases import FoundFileList
from tempsweep.types.models import (
    CandidateRoot,
    DeleteReport,
    OperationStatus,
    ScanReport,
)
from tempsweep.types.protocols import CancellationSignal, ProgressSink
from tempsweep.utils.logging import (
    new_operation_id,
    reset_operation_id,
    set_operation_id,
)

logger = logging.getLogger(__name__)


def _status(cancel: CancellationSignal) -> OperationStatus:
    return OperationStatus.CANCELLED if cancel.is_cancelled else OperationStatus.COMPLETED


async def scan_async(
    candidates: Iterable[CandidateRoot],
    cancel: CancellationSignal | None = None,
    on_progress: ProgressSink | None = None,
    *,
    scanner: FileScanner | None = None,
) -> ScanReport:
    """Run a scan in a worker thread.

    Args:
        candidates: Roots to scan
        cancel: Cooperative cancellation signal (a new token if omitted)
        on_progress: Progress sink, invoked from the worker thread
        scanner: Scanner to use; defaults to one with the built-in rules

    Returns:
        ScanReport with COMPLETED or CANCELLED status and the (partial)
        results, or FAILED with the unexpected exception that ended the scan
    """
    signal = cancel if cancel is not None else CancellationToken()
    active = scanner or FileScanner()
    roots = list(candidates)

    token = set_operation_id(new_operation_id())
    try:
        files = await asyncio.to_thread(active.scan, roots, signal, on_progress)
    except Exception as exc:
        logger.exception("Scan failed", extra={"error": str(exc)})
        return ScanReport(status=OperationStatus.FAILED, files=[], error=exc)
    finally:
        reset_operation_id(token)

    return ScanReport(status=_status(signal), files=files)


async def delete_async(
    files: FoundFileList,
    cancel: CancellationSignal | None = None,
    on_progress: ProgressSink | None = None,
) -> DeleteReport:
    """Run a deletion in a worker thread.

    Args:
        files: Files to delete in selection order
        cancel: Cooperative cancellation signal (a new token if omitted)
        on_progress: Progress sink, invoked from the worker thread

    Returns:
        DeleteReport with COMPLETED or CANCELLED status and the bytes freed,
        or FAILED with the unexpected exception that ended the deletion
    """
    signal = cancel if cancel is not None else CancellationToken()
    selection = list(files)

    token = set_operation_id(new_operation_id())
    try:
        freed = await asyncio.to_thread(delete_files, selection, signal, on_progress)
    except Exception as exc:
        logger.exception("Deletion failed", extra={"error": str(exc)})
        return DeleteReport(status=OperationStatus.FAILED, bytes_freed=0, error=exc)
    finally:
        reset_operation_id(token)

    return DeleteReport(status=_status(signal), bytes_freed=freed)
