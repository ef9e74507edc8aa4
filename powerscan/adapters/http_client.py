"""Shared HTTP transport utilities for device REST adapters.

This module wraps ``requests`` so adapters share one timeout policy and one
mapping of transport exceptions onto ``ApiTransportError``.

Dependencies:
    - ``requests`` for network I/O.
    - ``powerscan.adapters.api_errors.ApiTransportError`` for typed transport
      failures.

Call context:
    - Constructed by ``powerscan.adapters.power_rest.PowerRestAdapter``.
    - Every request runs on a fresh ``requests.Session``; nothing is pooled
      across devices.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import requests
from requests import exceptions as req_exc

from powerscan.adapters.api_errors import ApiTransportError

SessionFactory = Callable[[], requests.Session]


@dataclass
class HttpConfig:
    """Timeout and body-limit configuration for device HTTP calls.

    Attributes:
        request_timeout_s: Client-side timeout in seconds for each request.
        body_snippet_bytes: Maximum number of error-body bytes kept for
            diagnostics.
    """
    request_timeout_s: float = 5.0
    body_snippet_bytes: int = 512


class FreshSession:
    """Issue each GET on a new session and close it afterwards.

    This class is intentionally transport-only. Callers decide how to map
    non-200 responses and body contents into errors. No retries are made.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        session_factory: SessionFactory = requests.Session,
    ) -> None:
        """Create the transport wrapper.

        Args:
            cfg: Shared timeout settings.
            session_factory: Zero-argument callable returning a session object
                (tests pass stubs here).
        """
        self.cfg = cfg
        self._session_factory = session_factory

    @contextmanager
    def get(self, url: str) -> Iterator[requests.Response]:
        """Send a streamed GET and yield the response.

        Args:
            url: Absolute endpoint URL.

        Yields:
            ``requests.Response`` opened with ``stream=True``; it is closed
            together with its session when the context exits.

        Raises:
            ApiTransportError: On timeouts, refused connections, DNS failures
                and other transport errors.
        """
        context = f"GET {url}"
        session = self._session_factory()
        # LAN devices are never reached through environment proxies.
        session.trust_env = False
        try:
            try:
                resp = session.get(
                    url,
                    headers={"Accept": "application/json"},
                    timeout=self.cfg.request_timeout_s,
                    stream=True,
                )
            except req_exc.Timeout as exc:
                raise ApiTransportError(
                    f"{context}: timeout after {self.cfg.request_timeout_s:g}s ({exc})",
                    context=context,
                ) from exc
            except req_exc.RequestException as exc:
                raise ApiTransportError(f"{context}: {exc}", context=context) from exc
            try:
                yield resp
            finally:
                resp.close()
        finally:
            session.close()


__all__ = ["FreshSession", "HttpConfig", "SessionFactory"]
