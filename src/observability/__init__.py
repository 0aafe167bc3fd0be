"""Delivery records for capture requests.

This package records the outcome of each capture attempt (delivered or
failed, with status code and latency) as durable records:
- Capturing both "occurred at" and "logged at" timestamps.
- Persisting records to a sink (DuckDB or in-memory) without blocking the event loop.

Recording is optional and never changes what `CaptureClient` returns or raises.
"""

from .models import DeliveryRecord
from .recorder import DeliveryRecorder
from .sinks import DeliverySink, DuckDBDeliverySink, InMemoryDeliverySink

__all__ = [
    "DeliveryRecord",
    "DeliveryRecorder",
    "DeliverySink",
    "DuckDBDeliverySink",
    "InMemoryDeliverySink",
]
