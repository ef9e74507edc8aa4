"""Deadline signal shared between the session driver and resolvers.

A ``Deadline`` fires once, either when its time budget elapses or when it is
cancelled early. Waiters block on the underlying ``threading.Event``.
"""

from __future__ import annotations

import threading
import time
from typing import Optional


class Deadline:
    """One-shot cancellation signal with a fixed time budget."""

    def __init__(self, timeout_s: float) -> None:
        """Start the countdown immediately.

        Args:
            timeout_s: Seconds until the deadline fires.
        """
        self._expires_at = time.monotonic() + max(0.0, float(timeout_s))
        self.done = threading.Event()
        self._timer = threading.Timer(max(0.0, float(timeout_s)), self.done.set)
        self._timer.daemon = True
        self._timer.start()

    @property
    def expired(self) -> bool:
        return self.done.is_set()

    def remaining(self) -> float:
        """Seconds left before the deadline fires (``0.0`` once fired)."""
        if self.done.is_set():
            return 0.0
        return max(0.0, self._expires_at - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the deadline fires or ``timeout`` elapses.

        Returns:
            ``True`` when the deadline has fired.
        """
        return self.done.wait(timeout)

    def cancel(self) -> None:
        """Fire the deadline now."""
        self._timer.cancel()
        self.done.set()


__all__ = ["Deadline"]
