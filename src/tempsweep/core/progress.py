"""Monotonic progress reporting for long-running operations."""

import logging

from tempsweep.types.protocols import ProgressSink

logger = logging.getLogger(__name__)


def _discard(value: float, /) -> None:
    pass


class ProgressReporter:
    """Wrap a progress sink so the values it receives never regress.

    Values are clamped to [0, 1]. A value lower than the last one forwarded
    is dropped, so the sink observes a non-decreasing sequence.
    """

    sink: ProgressSink
    last: float | None

    def __init__(self, sink: ProgressSink | None = None) -> None:
        """Initialize the reporter.

        Args:
            sink: Callable receiving progress values; None discards them
        """
        self.sink = sink if sink is not None else _discard
        self.last = None

    def report(self, value: float) -> None:
        """Forward ``value`` to the sink unless it would move progress backwards.

        Args:
            value: Fraction completed; clamped to [0, 1]
        """
        clamped = min(max(float(value), 0.0), 1.0)
        if self.last is not None and clamped < self.last:
            logger.debug(
                "Dropping regressing progress value",
                extra={"value": clamped, "last": self.last},
            )
            return
        self.last = clamped
        self.sink(clamped)

    def complete(self) -> None:
        """Report 1.0 if it has not been reported yet."""
        if self.last != 1.0:
            self.report(1.0)
