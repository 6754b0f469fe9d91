"""Build trusted, authenticated HTTP connections to a Forge.

A connection is an ``httpx.Client`` bound to the Forge base URL with:

- a ``User-Agent`` naming this client, httpx, Python and the platform;
- an ``Authorization`` header when the settings carry a token;
- for ``https`` URLs, a trust store made of the OS default roots plus every
  ``*.pem`` file in the trusted-certificate directory.

Every response goes through the same pipeline: JSON bodies are decoded
first, then any non-2xx status raises ``ResponseStatusError``.
"""

from __future__ import annotations

import logging
import platform
import re
import ssl
import sys
from dataclasses import dataclass
from pathlib import Path

import httpx

from forge_client import __version__
from forge_client.errors import DecodeError, ForgeConnectionError, ResponseStatusError
from forge_client.models import ForgeResponse
from forge_client.settings import ForgeSettings, default_settings

logger = logging.getLogger(__name__)

USER_AGENT = (
    f"ForgeClient/{__version__} httpx/{httpx.__version__} "
    f"Python/{platform.python_version()} ({platform.machine()}-{sys.platform})"
)

_JSON_CONTENT_TYPE = re.compile(r"\bjson$")
_CERT_DIR = Path(__file__).parent / "ssl_certs"
_CERT_PATTERN = "*.pem"


# ─── Trust store ───────────────────────────────────────────


def build_trust_store(cert_dir: Path | None = None) -> ssl.SSLContext:
    """Compose OS default roots with every trusted ``*.pem`` in ``cert_dir``.

    A missing directory, or one without certificate files, leaves only the
    OS defaults in the store.

    Raises:
        ForgeConnectionError: If a certificate file cannot be loaded.
    """
    context = ssl.create_default_context()
    directory = cert_dir if cert_dir is not None else _CERT_DIR
    for cert_file in sorted(directory.glob(_CERT_PATTERN)):
        try:
            context.load_verify_locations(cafile=str(cert_file))
        except (ssl.SSLError, OSError) as exc:
            raise ForgeConnectionError(
                f"Failed to load trusted certificate '{cert_file}': {exc}"
            ) from exc
        logger.debug("Added trusted certificate %s", cert_file)
    return context


# ─── Connection ────────────────────────────────────────────


class ForgeConnection:
    """A configured HTTP client plus the response pipeline applied to every GET."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    @property
    def base_url(self) -> str:
        return str(self.http.base_url).rstrip("/")

    @property
    def headers(self) -> httpx.Headers:
        return self.http.headers

    def get(self, path: str, *, params: dict[str, object] | None = None) -> ForgeResponse:
        """GET ``path`` relative to the base URL.

        Raises:
            ForgeConnectionError: DNS, TCP, TLS or timeout failures.
            DecodeError: A 2xx JSON response whose body is not valid JSON.
            ResponseStatusError: Any non-2xx status.
        """
        try:
            response = self.http.get(path, params=params)
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            raise ForgeConnectionError(f"Failed to reach {self.base_url}{path}: {exc}") from exc

        body = _decode_body(response, path)
        _raise_for_status(response, body, path)
        return ForgeResponse(
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> ForgeConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _decode_body(response: httpx.Response, path: str) -> object:
    """First pipeline stage: decode bodies whose media type ends in ``json``."""
    media_type = response.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if not _JSON_CONTENT_TYPE.search(media_type):
        return response.text
    try:
        return response.json()
    except ValueError as exc:
        # Non-2xx bodies pass through undecoded; the status stage reports them.
        if not response.is_success:
            return response.text
        raise DecodeError(
            f"Invalid JSON in response from '{path}': {exc}",
            path=path,
            status_code=response.status_code,
        ) from exc


def _raise_for_status(response: httpx.Response, body: object, path: str) -> None:
    """Second pipeline stage: every non-2xx status is an error."""
    if not response.is_success:
        raise ResponseStatusError(response.status_code, body=body, path=path)


# ─── Builders ──────────────────────────────────────────────


def make_connection(
    url: str,
    *,
    settings: ForgeSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ForgeConnection:
    """Generate a new connection for the given base URL.

    Never performs network I/O. The authorization token is read from
    ``settings`` (or the process-wide default) now; later settings changes do
    not reach the returned connection.

    Args:
        url: Base URL, ``http://`` or ``https://``.
        settings: Explicit settings; defaults to :func:`default_settings`.
        transport: Transport override (e.g. ``httpx.MockTransport`` in tests).

    Raises:
        ForgeConnectionError: Malformed URL, unsupported scheme or a bad
            certificate bundle.
    """
    if settings is None:
        settings = default_settings()

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ForgeConnectionError(f"Malformed Forge URL '{url}': {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ForgeConnectionError(
            f"Unsupported Forge URL '{url}': expected an http:// or https:// URL."
        )

    headers = {"User-Agent": USER_AGENT}
    if settings.authorization_token:
        headers["Authorization"] = settings.authorization_token

    options: dict[str, object] = {
        "base_url": url,
        "headers": headers,
        "timeout": httpx.Timeout(settings.timeout, connect=settings.connect_timeout),
        "follow_redirects": True,
        "transport": transport,
    }

    if parsed.scheme == "https":
        conn = make_https_connection(options, settings)
    else:
        conn = make_http_connection(options)

    logger.debug("Built %s connection to %s", parsed.scheme, url)
    return conn


def make_http_connection(options: dict[str, object]) -> ForgeConnection:
    return ForgeConnection(httpx.Client(**options))  # type: ignore[arg-type]


def make_https_connection(options: dict[str, object], settings: ForgeSettings) -> ForgeConnection:
    trust_store = build_trust_store(settings.cert_dir)
    return ForgeConnection(httpx.Client(verify=trust_store, **options))  # type: ignore[arg-type]


@dataclass
class DefaultConnectionProvider:
    """Adapter for ConnectionProviderPort backed by :func:`make_connection`.

    With ``settings`` left as ``None`` the process-wide default is read each
    time a connection is built.
    """

    settings: ForgeSettings | None = None
    transport: httpx.BaseTransport | None = None

    def make_connection(self, base_url: str) -> ForgeConnection:
        return make_connection(base_url, settings=self.settings, transport=self.transport)
