"""Delivery record sinks (storage backends).

Sinks are synchronous; `DeliveryRecorder` calls them from a worker thread.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol

import duckdb

from .models import DeliveryOutcome, DeliveryRecord

_COLUMNS = (
    "logged_at",
    "occurred_at",
    "outcome",
    "event_name",
    "distinct_id",
    "endpoint",
    "status_code",
    "error",
    "property_count",
    "duration_ms",
)


class DeliverySink(Protocol):
    def write(self, record: DeliveryRecord) -> None: ...

    def close(self) -> None: ...


class InMemoryDeliverySink:
    """Keeps records in a list; for tests and local debugging."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[DeliveryRecord] = []

    def write(self, record: DeliveryRecord) -> None:
        with self._lock:
            self._records.append(record)

    def close(self) -> None:
        pass

    @property
    def records(self) -> list[DeliveryRecord]:
        with self._lock:
            return list(self._records)


class DuckDBDeliverySink:
    """Appends delivery records to a DuckDB table (one row per capture attempt)."""

    def __init__(self, *, path: str | Path, table: str = "capture_deliveries") -> None:
        self.path = Path(path)
        self.table = table
        self._lock = threading.Lock()
        self._conn = duckdb.connect(str(self.path))
        with self._lock:
            self._conn.execute(
                f"""
                create table if not exists {self.table} (
                  logged_at timestamptz not null,
                  occurred_at timestamptz not null,
                  outcome varchar not null,
                  event_name varchar not null,
                  distinct_id varchar not null,
                  endpoint varchar not null,
                  status_code integer,
                  error varchar,
                  property_count integer not null,
                  duration_ms double not null
                )
                """
            )

    def write(self, record: DeliveryRecord) -> None:
        placeholders = ", ".join("?" for _ in _COLUMNS)
        insert_sql = f"insert into {self.table} ({', '.join(_COLUMNS)}) values ({placeholders})"
        with self._lock:
            self._conn.execute(insert_sql, [getattr(record, column) for column in _COLUMNS])

    def count(self, outcome: DeliveryOutcome | None = None) -> int:
        """Number of stored attempts, optionally only those with `outcome`."""
        sql = f"select count(*) from {self.table}"
        params: list[str] = []
        if outcome is not None:
            sql += " where outcome = ?"
            params.append(outcome)
        with self._lock:
            row = self._conn.execute(sql, params).fetchone()
        return int(row[0]) if row else 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()
