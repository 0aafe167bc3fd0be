"""API credential resolution.

Credentials come from one of two sources, tried in a fixed order by
`resolve_auto`:

1. An environment variable (`POSTHOG_API_KEY` by default).
2. An external secret store (Google Secret Manager by default).

The environment always wins when it holds a usable key. Whatever the source,
the key is stripped and must be non-empty. A key shaped like the `.env.example`
placeholder (`your_..._here`) is also rejected as `InvalidCredential`, so a
copied-but-unedited `.env` falls through to the secret store instead of
sending events with a dummy key.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import CredentialError, InvalidCredential, MissingCredential, SecretFetchError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://app.posthog.com/"
POSTHOG_ENV = "POSTHOG_API_KEY"


class ApiOptions(BaseModel):
    """Resolved endpoint + API key pair, immutable once built."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = DEFAULT_ENDPOINT
    key: str

    @field_validator("key")
    def validate_key(cls, v: str) -> str:
        """Strip the key and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("API key must not be empty")
        return v

    def __repr__(self) -> str:
        return f"ApiOptions(endpoint={self.endpoint!r}, key='[REDACTED]')"

    __str__ = __repr__


class SecretStore(Protocol):
    """External secret-management capability."""

    async def get_secret(self, project_id: str, secret_name: str) -> bytes:
        """Return the raw secret payload for `secret_name` in `project_id`."""


class GoogleSecretManagerStore:
    """`SecretStore` backed by Google Cloud Secret Manager.

    The SDK client is blocking, so each lookup runs in a worker thread. The
    client itself is created lazily on the first lookup, inside that worker thread.
    """

    def __init__(self, *, version: str = "latest", client: Any | None = None) -> None:
        self.version = version
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                from google.cloud import secretmanager  # type: ignore
            except ImportError as exc:
                raise SecretFetchError(
                    "google-cloud-secret-manager is not installed; install the 'gcp' extra"
                ) from exc
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def secret_path(self, project_id: str, secret_name: str) -> str:
        return f"projects/{project_id}/secrets/{secret_name}/versions/{self.version}"

    async def get_secret(self, project_id: str, secret_name: str) -> bytes:
        name = self.secret_path(project_id, secret_name)

        def _access() -> bytes:
            """Build the client and access the secret version (runs in a worker thread).

            Building the client resolves application default credentials, which
            may query the metadata server.
            """
            response = self._get_client().access_secret_version(request={"name": name})
            return response.payload.data

        return await asyncio.to_thread(_access)


def _validated_key(raw: str, source: str) -> str:
    key = raw.strip()
    if not key:
        raise InvalidCredential(f"{source} is empty")
    if key.startswith("your_") and key.endswith("_here"):
        raise InvalidCredential(f"{source} still holds the placeholder value from .env.example")
    return key


def from_env(name: str = POSTHOG_ENV, *, endpoint: str = DEFAULT_ENDPOINT) -> ApiOptions:
    """Read the API key from environment variable `name`.

    Raises:
    - `MissingCredential` if the variable is not set
    - `InvalidCredential` if it is blank after stripping, or still holds the
      `your_..._here` placeholder from `.env.example` (this also makes
      `resolve_auto` fall back to the secret store)
    """
    raw = os.environ.get(name)
    if raw is None:
        raise MissingCredential(name)
    key = _validated_key(raw, f"environment variable {name}")
    return ApiOptions(endpoint=endpoint, key=key)


async def from_secret_store(
    project: str,
    secret_name: str,
    *,
    store: SecretStore | None = None,
    endpoint: str = DEFAULT_ENDPOINT,
) -> ApiOptions:
    """Fetch the API key from the secret store and decode it as UTF-8.

    Raises:
    - `SecretFetchError` if the store call fails or the payload is not UTF-8
    - `InvalidCredential` if the decoded secret is blank or a placeholder
    """
    if store is None:
        store = GoogleSecretManagerStore()

    try:
        payload = await store.get_secret(project, secret_name)
    except SecretFetchError:
        raise
    except Exception as exc:  # noqa: BLE001 - any store failure means "source unavailable"
        raise SecretFetchError(f"failed to fetch secret {secret_name!r} from project {project!r}: {exc}") from exc

    try:
        text = bytes(payload).decode("utf-8")
    except (TypeError, UnicodeDecodeError) as exc:
        raise SecretFetchError(f"secret {secret_name!r} is not valid UTF-8 text") from exc

    key = _validated_key(text, f"secret {secret_name!r}")
    return ApiOptions(endpoint=endpoint, key=key)


async def resolve_auto(
    project: str,
    secret_name: str,
    *,
    env_name: str = POSTHOG_ENV,
    store: SecretStore | None = None,
    endpoint: str = DEFAULT_ENDPOINT,
) -> ApiOptions:
    """Resolve credentials from the environment, falling back to the secret store.

    Any environment failure (unset or blank) is absorbed; if the secret store
    then fails too, its error is the one raised.
    """
    try:
        options = from_env(env_name, endpoint=endpoint)
    except CredentialError as exc:
        logger.debug("Environment credential unavailable (%s); trying secret store", exc)
    else:
        logger.info("Using API key from environment variable %s", env_name)
        return options

    options = await from_secret_store(project, secret_name, store=store, endpoint=endpoint)
    logger.info("Using API key from secret %s in project %s", secret_name, project)
    return options
