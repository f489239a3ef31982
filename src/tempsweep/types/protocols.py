"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols for the collaborators
passed into the scanner and remover, so callers can supply their own
cancellation and progress implementations without inheritance.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CancellationSignal(Protocol):
    """Cooperative cancellation signal polled at defined checkpoints."""

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation has been requested.

        Returns:
            True once the caller has asked the operation to stop
        """
        ...


class ProgressSink(Protocol):
    """Receiver of progress values in the range [0, 1]."""

    def __call__(self, value: float, /) -> None:
        """Accept a progress value.

        Args:
            value: Fraction of the operation completed
        """
        ...
