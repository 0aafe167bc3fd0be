"""Wire codec: flatten an `Event` plus API key into the ingestion JSON envelope."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import EventEncodingError
from .models import Event, Properties


class InnerEvent(BaseModel):
    """The request body posted to `{endpoint}capture/`.

    Field declaration order is the serialized order: api_key, event,
    properties, timestamp.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: str
    event: str
    properties: Properties
    timestamp: datetime | None = None


def build_envelope(event: Event, api_key: str) -> InnerEvent:
    """Validate and build the envelope for a single event.

    Properties are re-validated from a plain dump so that non-string values
    inserted after construction are rejected here rather than on the wire.
    """
    try:
        return InnerEvent.model_validate(
            {
                "api_key": api_key,
                "event": event.event,
                "properties": event.properties.model_dump(warnings=False),
                "timestamp": event.timestamp,
            }
        )
    except ValidationError as exc:
        raise EventEncodingError(f"event {event.event!r} is not encodable: {exc}") from exc


def encode_event(event: Event, api_key: str) -> bytes:
    """Encode an event as UTF-8 JSON (`timestamp` is null when unset)."""
    envelope = build_envelope(event, api_key)
    try:
        return envelope.model_dump_json().encode("utf-8")
    except PydanticSerializationError as exc:
        raise EventEncodingError(f"event {event.event!r} failed to serialize: {exc}") from exc
