"""Discovered service entries and the pure helpers that read them.

``DiscoveredEntry`` is produced by a ``ResolverPort`` implementation for every
advertisement it observes. The helpers below never mutate the entry and never
raise; missing data is reported as an empty string.
"""

from __future__ import annotations
import ipaddress
from dataclasses import dataclass
from typing import Tuple

FIRMWARE_KEYS = frozenset({"fv", "firmware", "firmwareversion", "version"})


@dataclass(frozen=True)
class DiscoveredEntry:
    """One advertised service instance observed on the network."""
    instance_name: str = ""
    host_name: str = ""            # e.g. "plug-1.local." (trailing dot kept)
    text_attributes: Tuple[str, ...] = ()
    ipv4_addresses: Tuple[str, ...] = ()
    ipv6_addresses: Tuple[str, ...] = ()

    @property
    def display_host(self) -> str:
        """Host name without the trailing domain separator."""
        host = self.host_name
        if host.endswith("."):
            return host[:-1]
        return host


def select_address(entry: DiscoveredEntry) -> str:
    """Pick the address used to build the device URL.

    Args:
        entry: Discovered service entry.

    Returns:
        First usable IPv4 address in dotted-quad form, else the first IPv6
        address wrapped in brackets, else ``""``.
    """
    for raw in entry.ipv4_addresses:
        try:
            addr = ipaddress.ip_address(raw)
        except ValueError:
            continue
        if isinstance(addr, ipaddress.IPv4Address):
            return str(addr)
        # IPv4-mapped IPv6 still has a 4-byte form.
        if addr.ipv4_mapped is not None:
            return str(addr.ipv4_mapped)

    if entry.ipv6_addresses:
        try:
            addr = ipaddress.ip_address(entry.ipv6_addresses[0])
        except ValueError:
            return ""
        return f"[{addr}]"
    return ""


def firmware_version(entry: DiscoveredEntry) -> str:
    """Return the firmware version advertised in the TXT attributes.

    Keys are matched case-insensitively against ``FIRMWARE_KEYS``; the first
    match wins and its value is returned verbatim. Attributes without ``=``
    are ignored.
    """
    for txt in entry.text_attributes:
        key, sep, value = txt.partition("=")
        if not sep:
            continue
        if key.lower() in FIRMWARE_KEYS:
            return value
    return ""


__all__ = ["DiscoveredEntry", "FIRMWARE_KEYS", "firmware_version", "select_address"]
