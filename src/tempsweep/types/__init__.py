"""Type definitions and protocols for tempsweep.

This package provides:
- Data models (immutable dataclasses and status enums)
- Protocol definitions (cancellation signal, progress sink)
- Type aliases (PEP 695 modern syntax)
"""

from tempsweep.types.aliases import (
    CandidateList,
    FoundFileList,
    ProgressCallback,
)
from tempsweep.types.models import (
    CandidateRoot,
    DeleteReport,
    DeletionOutcome,
    DeletionResult,
    FoundFile,
    MatchReason,
    OperationStatus,
    ScanReport,
)
from tempsweep.types.protocols import (
    CancellationSignal,
    ProgressSink,
)

__all__ = [
    # Type aliases
    "CandidateList",
    "FoundFileList",
    "ProgressCallback",
    # Data models
    "CandidateRoot",
    "DeleteReport",
    "DeletionOutcome",
    "DeletionResult",
    "FoundFile",
    "MatchReason",
    "OperationStatus",
    "ScanReport",
    # Protocols
    "CancellationSignal",
    "ProgressSink",
]
