"""Use case for one deadline-bounded discovery session.

``RunSession`` starts the resolver, consumes its entry stream on a dedicated
thread and hands every entry to the entry handler in arrival order while the
calling thread waits for the session deadline.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO

from powerscan.domain.config import DEFAULT_CONFIG, ScanConfig
from powerscan.domain.discovery import DiscoveredEntry
from powerscan.domain.ports import ResolverPort, SessionError
from powerscan.utils.deadline import Deadline
from powerscan.utils.entry_stream import EntryStream

EntryHandler = Callable[[DiscoveredEntry, bool], None]
ResolverFactory = Callable[[Any], ResolverPort]


@dataclass(frozen=True)
class SessionResult:
    """Outcome of a completed session.

    Attributes:
        handled: Number of entries dispatched to the handler.
        interrupted: ``True`` when the session was cancelled before its
            deadline (for example by Ctrl-C).
    """
    handled: int
    interrupted: bool = False


@dataclass
class RunSession:
    """Orchestrate resolver startup, stream consumption and termination."""

    resolver_factory: ResolverFactory
    handle_entry: EntryHandler
    resolver_config: Any = None
    config: ScanConfig = DEFAULT_CONFIG
    out: TextIO = field(default_factory=lambda: sys.stdout)

    def __post_init__(self) -> None:
        self._log = logging.getLogger(__name__)

    def __call__(self, *, list_only: bool = False) -> SessionResult:
        """Run discovery until the session deadline.

        Args:
            list_only: Forwarded to the entry handler for every entry.

        Returns:
            SessionResult: Handled entry count and interruption flag.

        Raises:
            SessionError: If the resolver cannot be created (``stage`` is
                ``"resolver"``) or browsing cannot start (``"browse"``).
        """
        cfg = self.config
        deadline = Deadline(cfg.session_timeout_s)
        self.out.write(f"Discovering Matter devices via {cfg.service_type}…\n")

        try:
            resolver = self.resolver_factory(self.resolver_config)
        except Exception as exc:
            deadline.cancel()
            raise SessionError("resolver", f"resolver error: {exc}") from exc

        stream = EntryStream()
        handled = [0]

        def _consume() -> None:
            for entry in stream:
                if deadline.expired:
                    # only the entry already in progress may outlive the session
                    self._log.debug("Deadline reached; not handling %r", entry.instance_name)
                    break
                handled[0] += 1
                self._log.debug(
                    "Handling %r (%.1fs left)", entry.instance_name, deadline.remaining()
                )
                try:
                    self.handle_entry(entry, list_only)
                except Exception:
                    self._log.exception("Entry handler failed for %r", entry.instance_name)

        consumer = threading.Thread(target=_consume, name="powerscan-consumer", daemon=True)
        consumer.start()

        try:
            resolver.browse(deadline, cfg.service_type, cfg.domain, stream)
        except Exception as exc:
            deadline.cancel()
            stream.close()
            raise SessionError("browse", f"browse error: {exc}") from exc

        interrupted = False
        try:
            deadline.wait()
            # Let an in-flight fetch finish within its own timeout.
            consumer.join(timeout=cfg.fetch_timeout_s)
        except KeyboardInterrupt:
            self._log.info("Interrupted; stopping discovery")
            interrupted = True
            deadline.cancel()

        if consumer.is_alive() and not interrupted:
            self._log.warning("Consumer still busy after the session deadline")
        self._log.info("Session finished: %d entries handled", handled[0])
        return SessionResult(handled=handled[0], interrupted=interrupted)


__all__ = ["EntryHandler", "ResolverFactory", "RunSession", "SessionResult"]
