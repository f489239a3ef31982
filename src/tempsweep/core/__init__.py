"""Core scanning and deletion engine.

Operations:
- resolve_candidates: well-known directories that hold disposable files
- scan / FileScanner: resilient traversal and classification
- delete_files: best-effort deletion with freed-bytes tracking
- scan_async / delete_async: background execution with end-state reporting
"""

from tempsweep.core.cancellation import CancellationToken
from tempsweep.core.classifier import Classifier
from tempsweep.core.locator import resolve_candidates
from tempsweep.core.remover import delete_file, delete_files, delete_files_detailed
from tempsweep.core.runner import delete_async, scan_async
from tempsweep.core.scanner import FileScanner, scan

__all__ = [
    "CancellationToken",
    "Classifier",
    "FileScanner",
    "delete_async",
    "delete_file",
    "delete_files",
    "delete_files_detailed",
    "resolve_candidates",
    "scan",
    "scan_async",
]
