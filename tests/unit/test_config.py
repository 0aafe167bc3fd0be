import pytest

from config import CaptureConfig, load_config


def test_capture_config_defaults():
    cfg = CaptureConfig()

    assert cfg.api_key_env == "POSTHOG_API_KEY"
    assert cfg.endpoint == "https://app.posthog.com/"
    assert cfg.timeout == 8.0
    assert cfg.secret_project is None
    assert cfg.secret_name == "posthog-api-key"
    assert cfg.record_path is None


@pytest.mark.parametrize("endpoint", ["https://app.posthog.com", "app.posthog.com/", ""])
def test_capture_config_endpoint_validated(endpoint: str):
    with pytest.raises(ValueError):
        CaptureConfig(endpoint=endpoint)


@pytest.mark.parametrize("timeout", [0, -2.5])
def test_capture_config_timeout_must_be_positive(timeout: float):
    with pytest.raises(ValueError):
        CaptureConfig(timeout=timeout)


def test_load_config_defaults():
    cfg = load_config().capture

    assert cfg == CaptureConfig()


def test_load_config_parses_optional_fields(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSTHOG_API_KEY_ENV", "ANALYTICS_KEY")
    monkeypatch.setenv("POSTHOG_ENDPOINT", "https://eu.posthog.com/")
    monkeypatch.setenv("POSTHOG_TIMEOUT", "2.5")
    monkeypatch.setenv("POSTHOG_SECRET_PROJECT", "my-gcp-project")
    monkeypatch.setenv("POSTHOG_SECRET_NAME", "analytics-key")
    monkeypatch.setenv("POSTHOG_RECORD_PATH", "/tmp/deliveries.duckdb")

    cfg = load_config().capture
    assert cfg.api_key_env == "ANALYTICS_KEY"
    assert cfg.endpoint == "https://eu.posthog.com/"
    assert cfg.timeout == 2.5
    assert cfg.secret_project == "my-gcp-project"
    assert cfg.secret_name == "analytics-key"
    assert cfg.record_path == "/tmp/deliveries.duckdb"


def test_load_config_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSTHOG_SECRET_PROJECT", "   ")
    monkeypatch.setenv("POSTHOG_ENDPOINT", "")

    cfg = load_config().capture
    assert cfg.secret_project is None
    assert cfg.endpoint == "https://app.posthog.com/"


def test_load_config_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSTHOG_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="POSTHOG_TIMEOUT"):
        load_config()
