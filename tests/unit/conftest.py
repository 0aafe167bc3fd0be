from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _no_threads_in_unit_tests(monkeypatch: pytest.MonkeyPatch):
    """Run `asyncio.to_thread` inline for unit tests.

    The transport and the secret store run blocking SDK calls in worker threads.
    In unit tests those calls are fakes, and threadpool workers can keep the
    Python process alive longer than expected under some runtimes.
    """

    async def _to_thread(func, /, *args, **kwargs):  # noqa: ANN001, D401
        return func(*args, **kwargs)

    monkeypatch.setattr("capture.transport.asyncio.to_thread", _to_thread)
    yield


@pytest.fixture(autouse=True)
def _clean_posthog_env(monkeypatch: pytest.MonkeyPatch):
    """Start every unit test without credential/config variables set."""
    for name in [
        "POSTHOG_API_KEY",
        "POSTHOG_API_KEY_ENV",
        "POSTHOG_ENDPOINT",
        "POSTHOG_TIMEOUT",
        "POSTHOG_SECRET_PROJECT",
        "POSTHOG_SECRET_NAME",
        "POSTHOG_RECORD_PATH",
    ]:
        monkeypatch.delenv(name, raising=False)
    yield
