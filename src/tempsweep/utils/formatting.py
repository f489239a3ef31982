"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions used by command-line
callers to display scan and deletion results. All functions are pure with
no side effects.
"""

# Binary unit constants (1024-based)
_KB = 1024
_MB = _KB * 1024  # 1,048,576
_GB = _MB * 1024  # 1,073,741,824
_TB = _GB * 1024  # 1,099,511,627,776

# Time unit constants
_MINUTE = 60
_HOUR = _MINUTE * 60  # 3,600
_DAY = _HOUR * 24  # 86,400


def format_size(bytes: int, *, precision: int = 1) -> str:
    """Convert bytes to human-readable size format.

    Uses binary units (1024-based) for consistency with system tools.

    Args:
        bytes: Number of bytes to format (must be non-negative)
        precision: Number of decimal places for KB and larger units (default: 1)

    Returns:
        Human-readable string representation of the size.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(2048)
        '2.0 KB'
        >>> format_size(5767168)
        '5.5 MB'
        >>> format_size(10737418240, precision=0)
        '10 GB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    for unit, factor in (("TB", _TB), ("GB", _GB), ("MB", _MB), ("KB", _KB)):
        if bytes >= factor:
            return f"{bytes / factor:.{precision}f} {unit}"

    return f"{bytes} B"


def format_duration(seconds: float) -> str:
    """Convert seconds to human-readable duration format.

    Shows the two most significant units for values over one minute.

    Args:
        seconds: Duration in seconds (must be non-negative)

    Returns:
        Human-readable duration string with adaptive granularity.
        - Days: "Xd Yh"
        - Hours: "Xh Ym"
        - Minutes: "Xm Ys"
        - Seconds: "Xs"

    Examples:
        >>> format_duration(45)
        '45s'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3665)
        '1h 1m'
        >>> format_duration(90000)
        '1d 1h'

    Note:
        Rounds down to whole units and omits trailing zero units
        (e.g., "1h 0m" becomes "1h").
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    total_seconds = int(seconds)

    for major_size, major_unit, minor_size, minor_unit in (
        (_DAY, "d", _HOUR, "h"),
        (_HOUR, "h", _MINUTE, "m"),
        (_MINUTE, "m", 1, "s"),
    ):
        if total_seconds >= major_size:
            major = total_seconds // major_size
            minor = (total_seconds % major_size) // minor_size
            if minor > 0:
                return f"{major}{major_unit} {minor}{minor_unit}"
            return f"{major}{major_unit}"

    return f"{total_seconds}s"
