"""Error taxonomy for the capture client.

Every public operation raises one of these (chained to the underlying cause)
instead of leaking transport- or SDK-specific exceptions.
"""

from __future__ import annotations


class CaptureError(RuntimeError):
    """Base class for all capture client failures."""


class CredentialError(CaptureError):
    """A credential source could not produce a usable API key."""


class MissingCredential(CredentialError):
    """The environment variable holding the API key is not set."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is not set")


class InvalidCredential(CredentialError):
    """A credential was found but is empty or whitespace-only."""


class SecretFetchError(CredentialError):
    """The external secret store failed to return a decodable secret."""


class TransportError(CaptureError):
    """The HTTP send failed below the application layer."""


class CaptureTimeout(CaptureError):
    """The HTTP exchange did not complete within the configured timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"capture request timed out after {timeout:g}s")


class EventEncodingError(CaptureError):
    """An event could not be serialized into the wire envelope."""
