from __future__ import annotations

import threading
from typing import Iterable, Optional

from powerscan.domain.discovery import DiscoveredEntry
from powerscan.domain.ports import ResolverPort
from powerscan.utils.deadline import Deadline
from powerscan.utils.entry_stream import EntryStream


class StaticResolver(ResolverPort):
    """In-memory resolver used for tests and offline development.

    Replays a fixed list of entries, then closes the stream when the
    deadline fires, like a real resolver would.
    """

    def __init__(self, entries: Optional[Iterable[DiscoveredEntry]] = None) -> None:
        self.entries = list(entries or [])
        self.browsed: list[tuple[str, str]] = []

    def browse(
        self,
        deadline: Deadline,
        service_type: str,
        domain: str,
        stream: EntryStream,
    ) -> None:
        self.browsed.append((service_type, domain))

        def _produce() -> None:
            for entry in self.entries:
                if deadline.expired:
                    break
                stream.put(entry)
            deadline.wait()
            stream.close()

        threading.Thread(target=_produce, name="powerscan-static-resolver", daemon=True).start()


def create_static_resolver(_config: object = None) -> StaticResolver:
    """Factory matching ``create_resolver`` that discovers nothing."""
    return StaticResolver()


__all__ = ["StaticResolver", "create_static_resolver"]
