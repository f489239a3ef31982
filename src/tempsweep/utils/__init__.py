"""Shared utility modules.

This package provides:
- Data size and duration formatting for display
- Logging configuration with per-operation identifiers
"""

from tempsweep.utils.formatting import (
    format_duration,
    format_size,
)

__all__ = [
    "format_duration",
    "format_size",
]
