"""Contract-focused tests for the discovery session driver."""

from __future__ import annotations

import io
import threading
import time
from typing import List, Tuple

import pytest

from powerscan.adapters.discovery_mock import StaticResolver
from powerscan.domain.config import ScanConfig
from powerscan.domain.discovery import DiscoveredEntry
from powerscan.domain.ports import DiscoveryError, SessionError
from powerscan.usecases import run_session
from powerscan.usecases.run_session import RunSession

FAST = ScanConfig(session_timeout_s=0.3, fetch_timeout_s=1.0)


class RecordingHandler:
    def __init__(self, fail_on: str = "") -> None:
        self.calls: List[Tuple[str, bool]] = []
        self.threads: List[str] = []
        self._fail_on = fail_on

    def __call__(self, entry: DiscoveredEntry, list_only: bool) -> None:
        self.calls.append((entry.instance_name, list_only))
        self.threads.append(threading.current_thread().name)
        if entry.instance_name == self._fail_on:
            raise RuntimeError("handler blew up")


class BrokenBrowseResolver:
    def browse(self, deadline, service_type, domain, stream) -> None:
        raise DiscoveryError("socket closed")


def _entries(*names: str) -> List[DiscoveredEntry]:
    return [DiscoveredEntry(instance_name=n, host_name=f"{n}.local.") for n in names]


def test_session_dispatches_entries_in_arrival_order() -> None:
    resolver = StaticResolver(_entries("a", "b", "c"))
    handler = RecordingHandler()
    out = io.StringIO()
    session = RunSession(
        resolver_factory=lambda _cfg: resolver,
        handle_entry=handler,
        config=FAST,
        out=out,
    )

    started = time.monotonic()
    result = session(list_only=True)
    elapsed = time.monotonic() - started

    assert handler.calls == [("a", True), ("b", True), ("c", True)]
    assert set(handler.threads) == {"powerscan-consumer"}
    assert result.handled == 3
    assert not result.interrupted
    assert resolver.browsed == [("_matter._tcp", "local.")]
    assert out.getvalue() == "Discovering Matter devices via _matter._tcp…\n"
    assert elapsed >= FAST.session_timeout_s * 0.9


def test_session_keeps_going_after_handler_exception() -> None:
    handler = RecordingHandler(fail_on="b")
    session = RunSession(
        resolver_factory=lambda _cfg: StaticResolver(_entries("a", "b", "c")),
        handle_entry=handler,
        config=FAST,
        out=io.StringIO(),
    )

    result = session(list_only=False)

    assert [name for name, _ in handler.calls] == ["a", "b", "c"]
    assert result.handled == 3


def test_session_passes_resolver_config_to_factory() -> None:
    seen = []
    session = RunSession(
        resolver_factory=lambda cfg: seen.append(cfg) or StaticResolver(),
        handle_entry=RecordingHandler(),
        resolver_config={"ip_version": "v4"},
        config=FAST,
        out=io.StringIO(),
    )

    session()

    assert seen == [{"ip_version": "v4"}]


def test_resolver_factory_failure_is_fatal() -> None:
    def _factory(_cfg):
        raise DiscoveryError("no interfaces")

    handler = RecordingHandler()
    session = RunSession(resolver_factory=_factory, handle_entry=handler, config=FAST, out=io.StringIO())

    with pytest.raises(SessionError) as excinfo:
        session()

    assert excinfo.value.stage == "resolver"
    assert excinfo.value.code == "RESOLVER_FAILED"
    assert excinfo.value.message == "resolver error: no interfaces"
    assert handler.calls == []


def test_browse_failure_is_fatal() -> None:
    session = RunSession(
        resolver_factory=lambda _cfg: BrokenBrowseResolver(),
        handle_entry=RecordingHandler(),
        config=ScanConfig(session_timeout_s=30),
        out=io.StringIO(),
    )

    started = time.monotonic()
    with pytest.raises(SessionError) as excinfo:
        session()

    assert excinfo.value.stage == "browse"
    assert excinfo.value.code == "BROWSE_FAILED"
    assert excinfo.value.message == "browse error: socket closed"
    assert time.monotonic() - started < 5


class SlowHandler:
    def __init__(self, delay_s: float) -> None:
        self.started: List[str] = []
        self.finished: List[str] = []
        self._delay_s = delay_s

    def __call__(self, entry: DiscoveredEntry, list_only: bool) -> None:
        self.started.append(entry.instance_name)
        time.sleep(self._delay_s)
        self.finished.append(entry.instance_name)


def test_no_new_entries_start_after_deadline() -> None:
    handler = SlowHandler(delay_s=0.6)
    session = RunSession(
        resolver_factory=lambda _cfg: StaticResolver(_entries("a", "b", "c", "d", "e", "f")),
        handle_entry=handler,
        config=ScanConfig(session_timeout_s=0.3, fetch_timeout_s=5.0),
        out=io.StringIO(),
    )

    started = time.monotonic()
    result = session()
    elapsed = time.monotonic() - started

    # the entry in flight at the deadline completes; nothing queued behind it runs
    assert handler.started == ["a"]
    assert handler.finished == ["a"]
    assert result.handled == 1
    assert elapsed < 2.0


def test_ctrl_c_while_draining_reports_interrupted(monkeypatch: pytest.MonkeyPatch) -> None:
    real_thread = threading.Thread

    class _InterruptedJoinThread(real_thread):
        def join(self, timeout=None) -> None:
            if self.name == "powerscan-consumer":
                raise KeyboardInterrupt
            super().join(timeout)

    monkeypatch.setattr(run_session.threading, "Thread", _InterruptedJoinThread)
    session = RunSession(
        resolver_factory=lambda _cfg: StaticResolver(_entries("a")),
        handle_entry=RecordingHandler(),
        config=FAST,
        out=io.StringIO(),
    )

    result = session()

    assert result.interrupted
