"""Capture event models.

An `Event` is built by the caller, optionally augmented with properties and a
timestamp, then handed to `CaptureClient.capture`. The event name is fixed at
construction; everything else is mutated through the explicit helpers below.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Properties(BaseModel):
    """The subject of an event plus its string key/value properties."""

    model_config = ConfigDict(extra="forbid")

    distinct_id: str
    properties: dict[str, str] = Field(default_factory=dict)

    def insert(self, key: str, value: str) -> None:
        """Set (or overwrite) a single property."""
        self.properties[key] = value


class Event(BaseModel):
    """A named capture event destined for the ingestion endpoint."""

    model_config = ConfigDict(extra="forbid")

    # Assigning to `event` after construction raises a ValidationError.
    event: str = Field(frozen=True)
    properties: Properties
    timestamp: datetime | None = None

    @classmethod
    def new(cls, event_name: str, distinct_id: str) -> "Event":
        """Create an event with no properties and no timestamp."""
        return cls(event=event_name, properties=Properties(distinct_id=distinct_id))

    @property
    def distinct_id(self) -> str:
        return self.properties.distinct_id

    def insert_prop(self, key: str, value: str) -> None:
        """Set (or overwrite) a single property."""
        self.properties.insert(key, value)

    def insert_prop_many(self, pairs: Iterable[tuple[str, str]]) -> None:
        """Apply `(key, value)` pairs in order; later pairs win for the same key."""
        for key, value in pairs:
            self.properties.insert(key, value)

    def set_timestamp(self, timestamp: datetime) -> None:
        """Attach a timestamp, replacing any previous one.

        The value is passed through unmodified (past and future times included).
        """
        self.timestamp = timestamp
