from __future__ import annotations
from typing import TYPE_CHECKING, Protocol

from powerscan.domain.power import PowerReading

if TYPE_CHECKING:  # pragma: no cover
    from powerscan.utils.deadline import Deadline
    from powerscan.utils.entry_stream import EntryStream


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class SessionError(UseCaseError):
    """Fatal discovery session failure (resolver setup or browse start)."""

    def __init__(self, stage: str, message: str):
        code = "RESOLVER_FAILED" if stage == "resolver" else "BROWSE_FAILED"
        super().__init__(code, message)
        self.stage = stage


class DiscoveryError(RuntimeError):
    """Raised by resolvers that cannot start or cannot browse."""


# ---- Ports (Hexagonal boundaries) ----
class ResolverPort(Protocol):
    """Service discovery provider writing entries into a closable stream.

    Implementations must close ``stream`` once ``deadline`` fires and must not
    put entries into it afterwards.
    """

    def browse(
        self,
        deadline: "Deadline",
        service_type: str,
        domain: str,
        stream: "EntryStream",
    ) -> None: ...


class PowerPort(Protocol):
    """Fetch live power telemetry from a device URL."""

    def fetch_power(self, url: str) -> PowerReading: ...
