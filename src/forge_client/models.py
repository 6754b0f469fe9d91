"""Domain models for forge-client. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import dataclass, field

# ─── Registry Models ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ForgeEndpoint:
    """Where a Forge lives: scheme, ``host[:port]`` and an optional path prefix."""

    host: str
    scheme: str = "https"
    path: str = ""

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


@dataclass(frozen=True, slots=True)
class Release:
    """One published release of a module, as listed in ``/v3/modules``."""

    version: str
    deleted_at: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# ─── Transport Models ─────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ForgeResponse:
    """A response that made it through the connection's response pipeline.

    ``body`` is the decoded JSON value when the content type is JSON,
    otherwise the raw response text.
    """

    status_code: int
    body: object = None
    headers: dict[str, str] = field(default_factory=dict)
