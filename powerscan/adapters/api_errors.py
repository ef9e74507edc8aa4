from __future__ import annotations

from typing import Any, Optional

from requests import exceptions as req_exc


class ApiError(RuntimeError):
    """Base class for device API failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.context = context


class ApiTransportError(ApiError):
    """DNS failure, refused connection, timeout or other transport failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


class ApiStatusError(ApiError):
    """Device answered with a status other than 200."""

    def __init__(
        self,
        status_line: str,
        snippet: str,
        *,
        status: int,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"unexpected status {status_line}: {snippet}",
            status=status,
            payload=snippet,
            context=context,
        )
        self.status_line = status_line
        self.snippet = snippet


class ApiDecodeError(ApiError):
    """Device answered 200 but the body is not the expected JSON object."""

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=200, payload=payload, context=context)


def status_line(resp: Any) -> str:
    """Render ``<code> <reason>`` for a response, e.g. ``500 Internal Server Error``."""
    code = getattr(resp, "status_code", 0)
    reason = (getattr(resp, "reason", "") or "").strip()
    return f"{code} {reason}" if reason else str(code)


def read_body_snippet(resp: Any, *, limit: int = 512) -> str:
    """Read at most ``limit`` body bytes without raising.

    The response should be opened with ``stream=True`` so that large bodies
    are never loaded entirely.
    """
    chunks = []
    size = 0
    try:
        for chunk in resp.iter_content(chunk_size=limit):
            if not chunk:
                continue
            chunks.append(chunk)
            size += len(chunk)
            if size >= limit:
                break
    except (req_exc.RequestException, OSError):
        # A broken body still yields a status error, just with less detail.
        pass
    raw = b"".join(chunks)[:limit]
    return raw.decode("utf-8", errors="replace").strip()


__all__ = [
    "ApiDecodeError",
    "ApiError",
    "ApiStatusError",
    "ApiTransportError",
    "read_body_snippet",
    "status_line",
]
