"""tempsweep - find and remove disposable files from well-known locations.

This package resolves temp, cache and download directories, scans them for
files that are safe to offer for deletion, and deletes a caller-selected
subset while reporting progress and supporting cooperative cancellation.
"""

from tempsweep.__main__ import main

__all__ = ["main"]
