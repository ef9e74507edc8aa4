"""Use case for reporting one discovered device."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from powerscan.domain.config import DEFAULT_CONFIG, ScanConfig
from powerscan.domain.discovery import DiscoveredEntry, firmware_version, select_address
from powerscan.domain.ports import PowerPort

from powerscan.adapters.api_errors import ApiError

_log = logging.getLogger(__name__)


@dataclass
class HandleEntry:
    """Use-case callable printing identity or live power for one entry.

    Failures are rendered into ``out`` and never raised, so one device
    cannot stop the handling of the next.
    """

    power_port: PowerPort
    out: TextIO = field(default_factory=lambda: sys.stdout)
    config: ScanConfig = DEFAULT_CONFIG

    def _write(self, text: str) -> None:
        self.out.write(text + "\n")

    def __call__(self, entry: DiscoveredEntry, list_only: bool) -> None:
        """Report ``entry`` in list or query mode.

        Args:
            entry: Entry received from the discovery stream.
            list_only: Print name and firmware only, without querying.

        Side Effects:
            Writes to ``out``; in query mode performs one HTTP request through
            ``power_port``.
        """
        self._write(f"\nDiscovered: {entry.instance_name} ({entry.display_host})")
        if list_only:
            fw = firmware_version(entry) or "unknown"
            self._write(f"  Name: {entry.instance_name}")
            self._write(f"  Firmware: {fw}")
            return

        address = select_address(entry)
        if not address:
            self._write("  No IPv4 address available; skipping power query.")
            return

        url = self.config.power_url(address)
        self._write(f"  Querying: {url}")

        try:
            reading = self.power_port.fetch_power(url)
        except ApiError as exc:
            _log.debug("Power query for %s failed: %s", url, exc)
            self._write(f"  Power query failed: {exc}")
            return
        except Exception as exc:
            _log.exception("Unexpected failure querying %s", url)
            self._write(f"  Power query failed: {exc}")
            return

        line = f"  Current power: {reading.current_watts:.2f} W"
        if reading.timestamp:
            line += f" (timestamp: {reading.timestamp})"
        self._write(line)


__all__ = ["HandleEntry"]
