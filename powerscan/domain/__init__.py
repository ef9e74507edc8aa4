"""Domain package exports for value objects and ports."""

from .config import DEFAULT_CONFIG, ScanConfig
from .discovery import DiscoveredEntry, firmware_version, select_address
from .ports import (
    DiscoveryError,
    PowerPort,
    ResolverPort,
    SessionError,
    UseCaseError,
)
from .power import PowerReading

__all__ = [
    "DEFAULT_CONFIG",
    "DiscoveredEntry",
    "DiscoveryError",
    "PowerPort",
    "PowerReading",
    "ResolverPort",
    "ScanConfig",
    "SessionError",
    "UseCaseError",
    "firmware_version",
    "select_address",
]
