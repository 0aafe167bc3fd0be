"""Demo entrypoint: capture one event against the configured endpoint.

This is a manual smoke harness, not production orchestration. It:

- Loads configuration from the environment (and `.env`).
- Resolves credentials (environment first, then the secret store if configured).
- Sends a single `demo_event`, optionally recording the delivery in DuckDB.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from capture import CaptureClient, Event
from config import load_config
from observability import DeliveryRecorder, DuckDBDeliverySink


async def run() -> None:
    config = load_config().capture

    recorder = None
    if config.record_path:
        recorder = DeliveryRecorder(sink=DuckDBDeliverySink(path=config.record_path))

    client = await CaptureClient.from_config(config, recorder=recorder)
    print(f"[capture] endpoint={client.options.endpoint} timeout={client.timeout}s")

    event = Event.new("demo_event", "demo_user")
    event.insert_prop("source", "main.py")
    event.insert_prop_many([("step", "1"), ("mode", "smoke")])
    event.set_timestamp(datetime.now(tz=timezone.utc))

    try:
        await client.capture(event)
        print(f"[capture] sent {event.event!r} for {event.distinct_id}")
    finally:
        if recorder is not None:
            await recorder.aclose()


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run())


if __name__ == "__main__":
    main()
