"""HTTP client for the Puppet Forge v3 modules API.

API docs: https://forgeapi.puppetlabs.com
Module listing: ``GET /v3/modules/<author>-<name>``
"""

from __future__ import annotations

import logging
import re
import threading

import httpx
import semver

from forge_client.connection.base import ConnectionProviderPort
from forge_client.connection.builder import DefaultConnectionProvider, ForgeConnection
from forge_client.errors import DecodeError, RegistryError, ResponseStatusError
from forge_client.models import ForgeEndpoint, Release

logger = logging.getLogger(__name__)

DEFAULT_FORGE = "forgeapi.puppetlabs.com"

# The pre-v3 Forge host; it does not serve /v3.
_LEGACY_FORGE_RE = re.compile(r"forge\.puppetlabs\.com")


def module_path(module_name: str) -> str:
    """Return the API path for a module, ``author/name`` becoming ``author-name``."""
    name = module_name.strip()
    if not name:
        raise ValueError("Module name must not be empty.")
    return f"/v3/modules/{name.replace('/', '-')}"


def parse_endpoint(forge: str) -> ForgeEndpoint:
    """Turn a bare host or a URL into an endpoint, rewriting the legacy Forge host.

    A path on the URL (a Forge served under a prefix) is kept apart from the
    host, so ``forge`` stays a plain ``host[:port]``.

    Raises:
        ValueError: If no host can be read from ``forge``.
    """
    raw = forge.strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Malformed Forge address '{forge}': {exc}") from exc
    if not url.host:
        raise ValueError(f"Malformed Forge address '{forge}': no host.")

    if _LEGACY_FORGE_RE.search(url.host):
        logger.warning(
            "%s does not support the latest puppet forge API. "
            "Please update to \"forge 'https://%s'\"",
            forge,
            DEFAULT_FORGE,
        )
        return ForgeEndpoint(host=DEFAULT_FORGE)

    return ForgeEndpoint(
        host=url.netloc.decode("ascii"),
        scheme=url.scheme,
        path=url.path.rstrip("/"),
    )


class ForgeClient:
    """Synchronous client answering "which versions of this module exist?".

    The connection is built lazily, once per client, through the injected
    ``provider``; concurrent first calls build it only once. Pass
    ``connection`` to use an already-built connection instead.

    Example::

        forge = ForgeClient()
        forge.versions("puppetlabs/stdlib")
        #=> ["0.1.6", ..., "9.6.0"]
    """

    def __init__(
        self,
        forge: str = DEFAULT_FORGE,
        *,
        provider: ConnectionProviderPort | None = None,
        connection: ForgeConnection | None = None,
    ) -> None:
        self._endpoint = parse_endpoint(forge)
        self._provider = provider if provider is not None else DefaultConnectionProvider()
        self._conn = connection
        self._conn_lock = threading.Lock()

    @property
    def endpoint(self) -> ForgeEndpoint:
        return self._endpoint

    @property
    def forge(self) -> str:
        """The Forge host used for requests."""
        return self._endpoint.host

    @property
    def conn(self) -> ForgeConnection:
        """The client's connection, built on first access."""
        conn = self._conn
        if conn is None:
            with self._conn_lock:
                if self._conn is None:
                    self._conn = self._provider.make_connection(self._endpoint.base_url)
                conn = self._conn
        return conn

    # ── Public API ────────────────────────────────────────────

    def versions(self, module_name: str) -> list[str]:
        """Query for all published versions of a module.

        Args:
            module_name: Fully qualified name, ``author/name`` or ``author-name``.

        Returns:
            Version strings, oldest first; empty when nothing is published.

        Raises:
            ValueError: If ``module_name`` is empty.
            RegistryError: On a non-2xx response (carries path and status).
            DecodeError: If the body is not a module listing.
            ForgeConnectionError: If the Forge could not be reached.
        """
        return [release.version for release in self.releases(module_name)]

    def latest_version(self, module_name: str) -> str | None:
        """Query for the newest published version of a module, or None."""
        versions = self.versions(module_name)
        return versions[-1] if versions else None

    def releases(self, module_name: str) -> list[Release]:
        """Non-deleted releases of a module, oldest first."""
        path = module_path(module_name)
        try:
            response = self.conn.get(path)
        except ResponseStatusError as exc:
            raise RegistryError(
                f"Request to Puppet Forge '{path}' failed. Status: {exc.status_code}",
                path=path,
                status_code=exc.status_code,
            ) from exc

        releases = [
            r for r in self._parse_releases(response.body, path, response.status_code)
            if not r.is_deleted
        ]
        releases.reverse()
        return _order_by_version(releases)

    def close(self) -> None:
        """Close the connection if one was built."""
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> ForgeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── Parsing ───────────────────────────────────────────────

    @staticmethod
    def _parse_releases(body: object, path: str, status_code: int) -> list[Release]:
        """Read the ``releases`` array, in registry order (newest first)."""

        def fail(reason: str) -> DecodeError:
            return DecodeError(
                f"Unexpected response from Puppet Forge '{path}': {reason}",
                path=path,
                status_code=status_code,
            )

        if not isinstance(body, dict):
            raise fail(f"expected a JSON object, got {type(body).__name__}")
        raw_releases = body.get("releases")
        if not isinstance(raw_releases, list):
            raise fail("missing 'releases' list")

        releases: list[Release] = []
        for entry in raw_releases:
            if not isinstance(entry, dict) or not isinstance(entry.get("version"), str):
                raise fail(f"release entry without a version: {entry!r}")
            deleted_at = entry.get("deleted_at")
            releases.append(
                Release(
                    version=entry["version"],
                    deleted_at=str(deleted_at) if deleted_at is not None else None,
                )
            )
        return releases


def _order_by_version(releases: list[Release]) -> list[Release]:
    """Stable sort by semver precedence; unchanged if any version is not semver."""
    try:
        keys = [semver.Version.parse(r.version) for r in releases]
    except ValueError:
        return releases
    order = sorted(range(len(releases)), key=keys.__getitem__)
    return [releases[i] for i in order]
