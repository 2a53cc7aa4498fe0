"""Cooperative cancellation flag shared between a scan and its caller."""

import threading


class CancellationToken:
    """Starts active. ``cancel()`` clears it; scans poll ``active`` at checkpoints."""

    def __init__(self):
        self._active = threading.Event()
        self._active.set()

    @property
    def active(self) -> bool:
        return self._active.is_set()

    @property
    def cancelled(self) -> bool:
        return not self._active.is_set()

    def cancel(self) -> None:
        self._active.clear()

    def reset(self) -> None:
        self._active.set()
