"""REST adapter for the device power endpoint.

``PowerRestAdapter`` implements ``PowerPort``: one bounded-timeout GET per
call, strict 200 check, and JSON decoding into ``PowerReading``.

Dependencies:
    - ``requests`` (through ``FreshSession``) for network I/O.

Call context:
    - Invoked by ``HandleEntry`` once per discovered device in query mode.
"""

from __future__ import annotations

import logging
from typing import Optional

from requests import exceptions as req_exc

from powerscan.domain.ports import PowerPort
from powerscan.domain.power import PowerReading

from .api_errors import (
    ApiDecodeError,
    ApiStatusError,
    ApiTransportError,
    read_body_snippet,
    status_line,
)
from .http_client import FreshSession, HttpConfig, SessionFactory

_log = logging.getLogger(__name__)


class PowerRestAdapter(PowerPort):
    """Query ``/api/power`` on a single device."""

    def __init__(
        self,
        cfg: Optional[HttpConfig] = None,
        *,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.cfg = cfg or HttpConfig()
        if session_factory is None:
            self.transport = FreshSession(self.cfg)
        else:
            self.transport = FreshSession(self.cfg, session_factory=session_factory)

    def fetch_power(self, url: str) -> PowerReading:
        """Fetch and decode a power reading.

        Args:
            url: Fully formed endpoint URL.

        Returns:
            Decoded ``PowerReading``.

        Raises:
            ApiTransportError: If the device cannot be reached in time.
            ApiStatusError: If the device answers with a non-200 status.
            ApiDecodeError: If the body is not a JSON object of the expected
                shape.
        """
        context = f"GET {url}"
        with self.transport.get(url) as resp:
            if resp.status_code != 200:
                snippet = read_body_snippet(resp, limit=self.cfg.body_snippet_bytes)
                _log.debug("%s -> %s", context, resp.status_code)
                raise ApiStatusError(
                    status_line(resp),
                    snippet,
                    status=resp.status_code,
                    context=context,
                )
            try:
                payload = resp.json()
            except ValueError as exc:
                # requests.JSONDecodeError is both a ValueError and a RequestException
                raise ApiDecodeError(f"invalid JSON body: {exc}", context=context) from exc
            except req_exc.RequestException as exc:
                raise ApiTransportError(f"{context}: {exc}", context=context) from exc

        try:
            return PowerReading.from_payload(payload)
        except ValueError as exc:
            raise ApiDecodeError(
                f"unexpected JSON shape: {exc}", payload=payload, context=context
            ) from exc


__all__ = ["PowerRestAdapter"]
