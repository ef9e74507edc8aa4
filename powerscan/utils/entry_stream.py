"""Closable single-producer/single-consumer stream of discovered entries."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, Optional

from powerscan.domain.discovery import DiscoveredEntry

_CLOSED = object()
_log = logging.getLogger(__name__)


class EntryStream:
    """Queue with an end-of-stream marker.

    Producers call ``put`` and finally ``close``; the consumer iterates until
    the stream is closed and every queued entry has been read.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, entry: DiscoveredEntry) -> bool:
        """Queue an entry. Returns ``False`` if the stream is already closed."""
        with self._lock:
            if self._closed:
                _log.debug("Dropping entry %r after stream close", entry.instance_name)
                return False
            self._queue.put(entry)
        return True

    def close(self) -> None:
        """Mark end-of-stream. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def get(self, timeout: Optional[float] = None) -> Optional[DiscoveredEntry]:
        """Return the next entry, or ``None`` at end-of-stream.

        Raises:
            queue.Empty: If ``timeout`` elapses before anything arrives.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # keep the marker for any later reader
            self._queue.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[DiscoveredEntry]:
        while True:
            entry = self.get()
            if entry is None:
                return
            yield entry


__all__ = ["EntryStream"]
