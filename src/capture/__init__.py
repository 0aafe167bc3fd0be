"""Client for submitting analytics capture events to a PostHog-style endpoint."""

from .client import CAPTURE_PATH, DEFAULT_TIMEOUT, CaptureClient
from .codec import InnerEvent, build_envelope, encode_event
from .credentials import (
    DEFAULT_ENDPOINT,
    POSTHOG_ENV,
    ApiOptions,
    GoogleSecretManagerStore,
    SecretStore,
    from_env,
    from_secret_store,
    resolve_auto,
)
from .errors import (
    CaptureError,
    CaptureTimeout,
    CredentialError,
    EventEncodingError,
    InvalidCredential,
    MissingCredential,
    SecretFetchError,
    TransportError,
)
from .models import Event, Properties
from .transport import RequestsTransport, Transport, TransportResponse, get_shared_transport

__all__ = [
    "CAPTURE_PATH",
    "DEFAULT_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "POSTHOG_ENV",
    "ApiOptions",
    "CaptureClient",
    "CaptureError",
    "CaptureTimeout",
    "CredentialError",
    "Event",
    "EventEncodingError",
    "GoogleSecretManagerStore",
    "InnerEvent",
    "InvalidCredential",
    "MissingCredential",
    "Properties",
    "RequestsTransport",
    "SecretFetchError",
    "SecretStore",
    "Transport",
    "TransportError",
    "TransportResponse",
    "build_envelope",
    "encode_event",
    "from_env",
    "from_secret_store",
    "get_shared_transport",
    "resolve_auto",
]
