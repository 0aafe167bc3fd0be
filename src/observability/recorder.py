"""Async recorder that writes delivery records without blocking the event loop."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Final, Literal

from .models import DeliveryOutcome, DeliveryRecord, utc_now
from .sinks import DeliverySink

logger = logging.getLogger(__name__)

_STOP: Final = object()


class DeliveryRecorder:
    """Turns capture outcomes into `DeliveryRecord`s and writes them off the hot path.

    `record_delivery` only enqueues; a background task hands each record to the
    (synchronous) sink in a worker thread. Lost records are counted rather than
    raised: `dropped` when the queue is full, `write_failures` when the sink errors.
    """

    def __init__(self, *, sink: DeliverySink, max_queue_size: int = 10000) -> None:
        self._sink = sink
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=max_queue_size)
        self._writer: asyncio.Task[None] | None = None
        self._closed = False

        self.dropped = 0
        self.write_failures = 0
        self.last_failure_at: datetime | None = None

    def _note_failure(self, kind: Literal["dropped", "write_failures"]) -> None:
        setattr(self, kind, getattr(self, kind) + 1)
        self.last_failure_at = utc_now()

    async def record_delivery(
        self,
        *,
        outcome: DeliveryOutcome,
        event_name: str,
        distinct_id: str,
        endpoint: str,
        occurred_at: datetime,
        duration_ms: float,
        property_count: int = 0,
        status_code: int | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Enqueue the outcome of one capture attempt (never blocks, never raises)."""
        if self._closed:
            return
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain(), name="delivery-record-writer")

        record = DeliveryRecord(
            outcome=outcome,
            event_name=event_name,
            distinct_id=distinct_id,
            endpoint=endpoint,
            status_code=status_code,
            error=type(error).__name__ if error is not None else None,
            property_count=property_count,
            duration_ms=duration_ms,
            occurred_at=occurred_at,
        )
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self._note_failure("dropped")

    async def aclose(self) -> None:
        """Write out everything queued so far, then close the sink. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._writer is not None:
            await self._queue.put(_STOP)
            await self._writer
        await asyncio.to_thread(self._sink.close)

    async def _drain(self) -> None:
        while (item := await self._queue.get()) is not _STOP:
            try:
                await asyncio.to_thread(self._sink.write, item)
            except Exception:  # noqa: BLE001 - record writes must not break capture
                logger.warning("Failed to write delivery record for %r", item.event_name, exc_info=True)
                self._note_failure("write_failures")
