"""Logging infrastructure with optional syslog integration and operation ID tracking.

This module configures the root logger for tempsweep callers and stamps
every record with the identifier of the scan or delete operation that
emitted it. The identifier lives in a ContextVar, so it follows the
operation into the worker thread started by ``asyncio.to_thread``.
"""

import contextvars
import logging
import logging.handlers
import sys
import uuid
from typing import Final, override

# Operation ID context variable for tracing one scan or delete call
operation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation_id",
    default=None,
)

# Log format constants
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(operation_id)s] - %(message)s"

SYSLOG_LOG_FORMAT: Final[str] = "tempsweep[%(process)d]: %(levelname)s - [%(operation_id)s] - %(name)s - %(message)s"

DEFAULT_SYSLOG_ADDRESS: Final[str] = "/dev/log"


class OperationIDFilter(logging.Filter):
    """Logging filter that adds the current operation ID to log records.

    Records emitted outside of any operation are stamped with ``"N/A"``.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add operation ID to log record from ContextVar.

        Args:
            record: Log record to enhance with operation ID

        Returns:
            True to allow the record to be logged
        """
        operation_id = operation_id_var.get()
        record.operation_id = operation_id if operation_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    enable_syslog: bool = False,
    syslog_address: str = DEFAULT_SYSLOG_ADDRESS,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Sets up the root logger with:
    - Operation ID tracking via ContextVar
    - Optional syslog handler
    - Console output on stdout

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_syslog: Enable syslog handler
        syslog_address: Syslog socket address (default: /dev/log)
        enable_console: Enable console output handler

    Example:
        >>> configure_logging(log_level="DEBUG", enable_syslog=False)
        >>> logging.getLogger(__name__).info("Scan started", extra={"roots": 3})
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    operation_filter = OperationIDFilter()

    if enable_syslog:
        try:
            syslog_handler = logging.handlers.SysLogHandler(
                address=syslog_address,
                facility=logging.handlers.SysLogHandler.LOG_USER,
            )
            syslog_handler.setFormatter(logging.Formatter(SYSLOG_LOG_FORMAT))
            syslog_handler.addFilter(operation_filter)
            root_logger.addHandler(syslog_handler)

        except OSError as exc:
            # Syslog not available; fall back to console only
            print(
                f"Warning: Could not connect to syslog at {syslog_address}: {exc}",
                file=sys.stderr,
            )

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        console_handler.addFilter(operation_filter)
        root_logger.addHandler(console_handler)


def new_operation_id() -> str:
    """Generate a short identifier for a scan or delete call."""
    return uuid.uuid4().hex[:12]


def set_operation_id(operation_id: str) -> contextvars.Token[str | None]:
    """Set the operation ID for the current context.

    Args:
        operation_id: Identifier for the running operation

    Returns:
        Token that restores the previous value when passed to ``reset_operation_id``
    """
    return operation_id_var.set(operation_id)


def reset_operation_id(token: contextvars.Token[str | None]) -> None:
    """Restore the operation ID that was active before ``set_operation_id``."""
    operation_id_var.reset(token)


def get_operation_id() -> str | None:
    """Get the current operation ID from context.

    Returns:
        Current operation ID or None if not set
    """
    return operation_id_var.get()
