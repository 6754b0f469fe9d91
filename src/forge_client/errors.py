"""Exception hierarchy for forge-client.

All exceptions inherit from ForgeError (single catch point).
Nothing here is retried or recovered by the library; callers decide how to
present the failure.
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base exception for all forge-client errors."""


class ConfigError(ForgeError):
    """Settings could not be loaded, or were configured twice."""


class ForgeConnectionError(ForgeError, ConnectionError):
    """The connection could not be built or the transport failed.

    Covers local misconfiguration (bad certificate bundle, malformed base
    URL) as well as DNS, TCP and TLS failures during a request.
    """


class ResponseStatusError(ForgeError):
    """The registry answered with a non-2xx status."""

    def __init__(self, status_code: int, body: object = None, path: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.path = path
        super().__init__(f"HTTP {status_code} for '{path}'")


class RegistryError(ForgeError):
    """The registry exchange completed but signalled (or implied) a failure."""

    def __init__(self, message: str, *, path: str = "", status_code: int | None = None) -> None:
        self.path = path
        self.status_code = status_code
        super().__init__(message)


class DecodeError(RegistryError):
    """The response body was not JSON, or not shaped like a module listing."""
