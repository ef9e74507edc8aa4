"""mDNS/DNS-SD discovery adapter backed by ``zeroconf``.

This adapter implements ``ResolverPort``: it browses a service type, resolves
every added or updated service into a ``DiscoveredEntry`` and writes it into
the caller's ``EntryStream``. When the session deadline fires the browser is
cancelled, the zeroconf instance is closed and the stream is closed.

Dependencies:
    - ``zeroconf`` for multicast DNS browsing and service resolution.

Call context:
    - Built by ``create_resolver`` from the CLI composition root and driven
      by ``RunSession``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from zeroconf import (
    InterfaceChoice,
    IPVersion,
    ServiceBrowser,
    ServiceListener,
    Zeroconf,
)

from powerscan.domain.discovery import DiscoveredEntry
from powerscan.domain.ports import DiscoveryError, ResolverPort
from powerscan.utils.deadline import Deadline
from powerscan.utils.entry_stream import EntryStream

_log = logging.getLogger(__name__)

_IP_VERSIONS = {
    "all": IPVersion.All,
    "v4": IPVersion.V4Only,
    "v6": IPVersion.V6Only,
}


@dataclass(frozen=True)
class ResolverConfig:
    """Zeroconf socket options.

    Attributes:
        ip_version: ``"all"``, ``"v4"`` or ``"v6"``.
        interfaces: Interface addresses to bind, or ``None`` for all.
        resolve_timeout_ms: Per-service resolution budget.
    """
    ip_version: str = "all"
    interfaces: Optional[Sequence[str]] = None
    resolve_timeout_ms: int = 3000


def qualified_type(service_type: str, domain: str) -> str:
    """Join ``_matter._tcp`` and ``local.`` into ``_matter._tcp.local.``."""
    service = service_type.strip().strip(".")
    zone = domain.strip().strip(".") or "local"
    return f"{service}.{zone}."


def _decode(value: Union[bytes, str]) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def entry_from_service_info(info: Any, type_: str) -> DiscoveredEntry:
    """Map a resolved ``zeroconf.ServiceInfo`` onto a ``DiscoveredEntry``."""
    name = info.name or ""
    suffix = "." + type_
    instance = name[: -len(suffix)] if name.endswith(suffix) else name

    text = []
    for key, value in (info.properties or {}).items():
        if value is None:
            text.append(_decode(key))
        else:
            text.append(f"{_decode(key)}={_decode(value)}")

    return DiscoveredEntry(
        instance_name=instance,
        host_name=info.server or "",
        text_attributes=tuple(text),
        ipv4_addresses=tuple(info.parsed_addresses(IPVersion.V4Only)),
        ipv6_addresses=tuple(info.parsed_addresses(IPVersion.V6Only)),
    )


class _EntryListener(ServiceListener):
    """Resolve browsed services and forward them to the stream."""

    def __init__(
        self,
        stream: EntryStream,
        deadline: Deadline,
        resolve_timeout_ms: int,
    ) -> None:
        self._stream = stream
        self._deadline = deadline
        self._resolve_timeout_ms = resolve_timeout_ms

    def _resolve(self, zc: Zeroconf, type_: str, name: str) -> None:
        if self._deadline.expired:
            return
        info = zc.get_service_info(type_, name, timeout=self._resolve_timeout_ms)
        if info is None:
            _log.debug("Could not resolve %s", name)
            return
        self._stream.put(entry_from_service_info(info, type_))

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        _log.debug("Service added: %s", name)
        self._resolve(zc, type_, name)

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        _log.debug("Service updated: %s", name)
        self._resolve(zc, type_, name)

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        _log.debug("Service removed: %s", name)


class ZeroconfResolver(ResolverPort):
    """``ResolverPort`` over a single ``Zeroconf`` instance."""

    def __init__(
        self,
        zc: Zeroconf,
        config: ResolverConfig,
        *,
        browser_factory: Callable[..., Any] = ServiceBrowser,
    ) -> None:
        self._zc = zc
        self.config = config
        self._browser_factory = browser_factory

    def browse(
        self,
        deadline: Deadline,
        service_type: str,
        domain: str,
        stream: EntryStream,
    ) -> None:
        """Start browsing; entries arrive in ``stream`` until ``deadline``.

        Raises:
            DiscoveryError: If the browser cannot be started.
        """
        type_ = qualified_type(service_type, domain)
        listener = _EntryListener(stream, deadline, self.config.resolve_timeout_ms)
        try:
            browser = self._browser_factory(self._zc, type_, listener)
        except Exception as exc:
            self._zc.close()
            raise DiscoveryError(f"cannot browse {type_}: {exc}") from exc
        _log.info("Browsing %s", type_)

        def _shutdown() -> None:
            deadline.wait()
            try:
                browser.cancel()
                self._zc.close()
            finally:
                stream.close()
                _log.info("Stopped browsing %s", type_)

        threading.Thread(target=_shutdown, name="powerscan-browse-stop", daemon=True).start()


def create_resolver(config: Optional[ResolverConfig] = None) -> ZeroconfResolver:
    """Build a zeroconf-backed resolver.

    Raises:
        DiscoveryError: If the IP version is unknown or multicast sockets
            cannot be opened.
    """
    cfg = config or ResolverConfig()
    ip_version = _IP_VERSIONS.get(cfg.ip_version)
    if ip_version is None:
        raise DiscoveryError(f"unknown ip_version {cfg.ip_version!r}")
    interfaces = list(cfg.interfaces) if cfg.interfaces else InterfaceChoice.All
    try:
        zc = Zeroconf(interfaces=interfaces, ip_version=ip_version)
    except Exception as exc:
        raise DiscoveryError(f"cannot start zeroconf: {exc}") from exc
    return ZeroconfResolver(zc, cfg)


__all__ = [
    "ResolverConfig",
    "ZeroconfResolver",
    "create_resolver",
    "entry_from_service_info",
    "qualified_type",
]
