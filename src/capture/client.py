"""Async client for the capture endpoint of a PostHog-style ingestion service.

- Credentials are resolved once, before the client is built, and never change.
- Each `capture` is one POST to `{endpoint}capture/`, bounded by the timeout
  in effect when the call starts. There are no retries.
- `capture_batch` sends events one at a time, in order, and stops at the
  first failure.
- Every client shares the process-wide transport unless one is injected.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Final

from .codec import encode_event
from .credentials import ApiOptions, SecretStore, from_env, resolve_auto
from .errors import CaptureError, CaptureTimeout, TransportError
from .models import Event
from .transport import Transport, TransportResponse, get_shared_transport

if TYPE_CHECKING:
    from config import CaptureConfig
    from observability import DeliveryRecorder

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final[float] = 8.0
CAPTURE_PATH: Final[str] = "capture/"


def _validate_timeout(timeout: float) -> float:
    if timeout <= 0:
        raise ValueError(f"timeout must be > 0. Got: {timeout}")
    return float(timeout)


class CaptureClient:
    """Capture client bound to one set of credentials.

    Members:
    - Credentials: `options` (endpoint + API key)
    - Timeout: `timeout` (seconds, per capture call)
    - Transport: `transport` (shared `RequestsTransport` by default)
    - Recorder: optional `DeliveryRecorder` for per-attempt outcomes
    """

    def __init__(
        self,
        options: ApiOptions,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        recorder: DeliveryRecorder | None = None,
    ) -> None:
        self.options = options
        self._timeout = _validate_timeout(timeout)
        self.transport: Transport = transport if transport is not None else get_shared_transport()
        self.recorder = recorder

    @classmethod
    async def from_config(
        cls,
        config: CaptureConfig,
        *,
        store: SecretStore | None = None,
        transport: Transport | None = None,
        recorder: DeliveryRecorder | None = None,
    ) -> "CaptureClient":
        """Resolve credentials for `config` and build a client.

        With a secret project configured the environment is tried first and the
        secret store second; otherwise only the environment is consulted.
        """
        if config.secret_project:
            options = await resolve_auto(
                config.secret_project,
                config.secret_name,
                env_name=config.api_key_env,
                store=store,
                endpoint=config.endpoint,
            )
        else:
            options = from_env(config.api_key_env, endpoint=config.endpoint)
        return cls(options, timeout=config.timeout, transport=transport, recorder=recorder)

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def capture_url(self) -> str:
        return f"{self.options.endpoint}{CAPTURE_PATH}"

    def set_timeout(self, timeout: float) -> None:
        """Change the timeout for subsequent calls (in-flight calls are unaffected)."""
        self._timeout = _validate_timeout(timeout)

    async def capture(self, event: Event) -> None:
        """Send a single event.

        Raises:
        - `EventEncodingError` if the event cannot be serialized
        - `TransportError` if the request could not be sent
        - `CaptureTimeout` if no response arrived within the timeout
        """
        timeout = self._timeout
        body = encode_event(event, self.options.key)
        url = self.capture_url
        headers = {"Content-Type": "application/json"}

        occurred_at = datetime.now(tz=timezone.utc)
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self.transport.send("POST", url, headers=headers, body=body, timeout=timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            err = CaptureTimeout(timeout)
            await self._record(event, occurred_at, start, error=err)
            raise err from exc
        except CaptureError as exc:
            await self._record(event, occurred_at, start, error=exc)
            raise
        except Exception as exc:  # noqa: BLE001 - injected transports may raise anything
            err = TransportError(f"POST {url} failed: {exc}")
            await self._record(event, occurred_at, start, error=err)
            raise err from exc

        logger.debug("Captured %r for %s: HTTP %s", event.event, event.distinct_id, response.status_code)
        if not response.ok:
            logger.warning("Capture endpoint answered HTTP %s for event %r", response.status_code, event.event)
        await self._record(event, occurred_at, start, response=response)

    async def capture_batch(self, events: Iterable[Event]) -> None:
        """Send events sequentially, in order, stopping at the first failure.

        Events sent before the failure are not rolled back.
        """
        for event in events:
            await self.capture(event)

    async def _record(
        self,
        event: Event,
        occurred_at: datetime,
        start: float,
        *,
        response: TransportResponse | None = None,
        error: BaseException | None = None,
    ) -> None:
        if self.recorder is None:
            return
        await self.recorder.record_delivery(
            outcome="failed" if error is not None else "delivered",
            event_name=event.event,
            distinct_id=event.distinct_id,
            endpoint=self.options.endpoint,
            occurred_at=occurred_at,
            duration_ms=(time.monotonic() - start) * 1000.0,
            property_count=len(event.properties.properties),
            status_code=response.status_code if response is not None else None,
            error=error,
        )
