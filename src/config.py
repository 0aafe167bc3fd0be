"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating fields and providing actionable error messages.

The API key itself is not read here; `capture.credentials` resolves it from
the variable named by `api_key_env` (or the secret store) when a client is built.
"""

import os
from typing import TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

from capture.credentials import DEFAULT_ENDPOINT, POSTHOG_ENV

_T = TypeVar("_T", int, float)


def _get_env_str(name: str, default: str | None) -> str | None:
    """Read an optional string env var; blank counts as unset."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class CaptureConfig(BaseModel):
    """Configuration for talking to the capture endpoint."""

    api_key_env: str = Field(default=POSTHOG_ENV, description="Env var holding the API key")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Ingestion base URL")
    timeout: float = Field(default=8.0, description="Per-request timeout (seconds)")

    # Secret store fallback (Google Secret Manager); disabled without a project.
    secret_project: str | None = Field(default=None, description="Secret store project id")
    secret_name: str = Field(default="posthog-api-key", description="Secret holding the API key")

    record_path: str | None = Field(default=None, description="DuckDB file for delivery records")

    @field_validator("endpoint")
    def validate_endpoint(cls, v: str) -> str:
        """The capture path is appended directly, so the base URL must end with '/'."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"POSTHOG_ENDPOINT must be an http(s) URL. Got: {v!r}")
        if not v.endswith("/"):
            raise ValueError(f"POSTHOG_ENDPOINT must end with '/'. Got: {v!r}")
        return v

    @field_validator("timeout")
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"POSTHOG_TIMEOUT must be > 0. Got: {v}")
        return v


class Config(BaseModel):
    """Top-level application configuration."""

    capture: CaptureConfig = Field(default_factory=CaptureConfig, description="Capture client configuration")


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages for malformed values.
    """
    # Load variables from `.env` into the process environment (without overriding
    # already-set env vars).
    dotenv.load_dotenv()

    capture = CaptureConfig(
        api_key_env=_get_env_str("POSTHOG_API_KEY_ENV", POSTHOG_ENV),
        endpoint=_get_env_str("POSTHOG_ENDPOINT", DEFAULT_ENDPOINT),
        timeout=_get_env_number("POSTHOG_TIMEOUT", 8.0, float),
        secret_project=_get_env_str("POSTHOG_SECRET_PROJECT", None),
        secret_name=_get_env_str("POSTHOG_SECRET_NAME", "posthog-api-key"),
        record_path=_get_env_str("POSTHOG_RECORD_PATH", None),
    )
    return Config(capture=capture)
