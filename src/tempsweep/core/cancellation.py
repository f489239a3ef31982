"""Cooperative cancellation token shared between a caller and a running operation."""

import threading


class CancellationToken:
    """Thread-safe cancellation flag polled by the scanner and remover.

    The caller keeps a reference and calls ``cancel()`` from any thread; the
    running operation checks ``is_cancelled`` at its checkpoints and returns
    its partial result. Cancellation cannot be undone.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event: threading.Event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"


class _NeverCancelled:
    __slots__ = ()

    @property
    def is_cancelled(self) -> bool:
        return False


# Default signal for callers that never cancel
NEVER_CANCELLED = _NeverCancelled()
