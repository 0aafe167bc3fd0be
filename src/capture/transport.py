"""HTTP transport used by `CaptureClient`.

The HTTP call uses a `requests.Session` executed in a thread, so a single
connection pool is reused without introducing an async HTTP dependency.
A process-wide transport is created lazily by `get_shared_transport()` and
shared by every client instance.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import requests  # type: ignore
import urllib3

from .errors import CaptureTimeout, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Asynchronous "send one HTTP request" capability."""

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float,
    ) -> TransportResponse:
        """Send a request and return the raw response.

        Raises `TransportError` or `CaptureTimeout` on failure.
        """


class RequestsTransport:
    """`Transport` backed by a shared `requests.Session`."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float,
    ) -> TransportResponse:
        def _do_request() -> TransportResponse:
            """Execute the HTTP request synchronously (runs in a worker thread)."""
            try:
                resp = self.session.request(method, url, headers=dict(headers), data=body, timeout=timeout)
            except requests.Timeout as exc:
                raise CaptureTimeout(timeout) from exc
            except requests.RequestException as exc:
                raise TransportError(f"{method} {url} failed: {exc}") from exc
            except (urllib3.exceptions.HTTPError, ValueError) as exc:
                # urllib3 URL parsing errors (e.g. an empty host label) escape requests.
                raise TransportError(f"{method} {url} failed: {exc}") from exc
            return TransportResponse(status_code=resp.status_code, content=resp.content or b"")

        return await asyncio.to_thread(_do_request)


_shared_transport: RequestsTransport | None = None
_shared_lock = threading.Lock()


def get_shared_transport() -> RequestsTransport:
    """Return the process-wide transport, creating it on first use.

    Safe under concurrent first use: exactly one instance is ever built.
    """
    global _shared_transport
    transport = _shared_transport
    if transport is not None:
        return transport
    with _shared_lock:
        if _shared_transport is None:
            logger.debug("Creating shared HTTP transport")
            _shared_transport = RequestsTransport()
        return _shared_transport
