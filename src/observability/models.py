"""Delivery record models.

Records are designed to be:
- Durable and append-only (sink decides storage).
- Safe by default: the API key and property values are never stored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


DeliveryOutcome = Literal["delivered", "failed"]


class DeliveryRecord(BaseModel):
    """Outcome of a single capture attempt."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    outcome: DeliveryOutcome

    event_name: str
    distinct_id: str
    endpoint: str

    # HTTP status when a response arrived; None for transport errors/timeouts.
    status_code: int | None = None
    # Error class name for failed attempts (e.g. "CaptureTimeout").
    error: str | None = None

    property_count: int = 0
    duration_ms: float = 0.0

    occurred_at: datetime
    logged_at: datetime = Field(default_factory=utc_now)
