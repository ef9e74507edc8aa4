"""Fixed scan policy shared by the CLI, the session driver and the adapters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanConfig:
    """Scan policy.

    Attributes:
        service_type: DNS-SD service type browsed for devices.
        domain: Browse domain.
        session_timeout_s: Overall discovery window measured from start.
        fetch_timeout_s: Client-side timeout for each power query.
        power_port: TCP port of the device power API.
        power_path: Path of the device power API.
        body_snippet_bytes: Maximum error body bytes echoed in status errors.
    """
    service_type: str = "_matter._tcp"
    domain: str = "local."
    session_timeout_s: float = 15.0
    fetch_timeout_s: float = 5.0
    power_port: int = 80
    power_path: str = "/api/power"
    body_snippet_bytes: int = 512

    def power_url(self, address: str) -> str:
        """Return the power endpoint URL for an already URL-safe host."""
        return f"http://{address}:{self.power_port}{self.power_path}"


DEFAULT_CONFIG = ScanConfig()

__all__ = ["DEFAULT_CONFIG", "ScanConfig"]
