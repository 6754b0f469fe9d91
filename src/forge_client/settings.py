"""Forge client settings: YAML file, environment overrides, process-wide default.

The YAML file carries a single ``forge:`` mapping::

    forge:
      baseurl: https://forgeapi.puppetlabs.com
      authorization_token: "Bearer abc123"
      timeout: 30
      connect_timeout: 10
      cert_dir: /etc/forge-client/certs

Environment variables override file values:
``FORGE_AUTHORIZATION_TOKEN``, ``FORGE_BASEURL`` and ``FORGE_TIMEOUT``.

The process-wide default is set at most once with :func:`configure`, before
any client is built, and is read-only after that.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from forge_client.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "FORGE_CLIENT_CONFIG"
_TOKEN_ENV = "FORGE_AUTHORIZATION_TOKEN"
_BASEURL_ENV = "FORGE_BASEURL"
_TIMEOUT_ENV = "FORGE_TIMEOUT"

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_CONNECT_TIMEOUT = 10.0

_KNOWN_KEYS = frozenset(
    {"baseurl", "authorization_token", "timeout", "connect_timeout", "cert_dir"}
)


@dataclass(frozen=True, slots=True)
class ForgeSettings:
    """Explicit configuration handed to connection builders.

    ``authorization_token`` is sent verbatim as the ``Authorization`` header
    (include any ``Bearer`` prefix yourself). ``cert_dir`` replaces the
    bundled trusted-certificate directory when set.
    """

    authorization_token: str | None = None
    baseurl: str | None = None
    timeout: float = _DEFAULT_TIMEOUT
    connect_timeout: float = _DEFAULT_CONNECT_TIMEOUT
    cert_dir: Path | None = None


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ForgeSettings:
    """Build settings from an optional YAML file plus environment overrides.

    Args:
        path: YAML file to read. Defaults to ``$FORGE_CLIENT_CONFIG``; when
            neither is given only the environment and defaults apply.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: If the file is missing, unparsable or has bad values.
    """
    env = os.environ if environ is None else environ
    if path is None and env.get(CONFIG_ENV):
        path = env[CONFIG_ENV]

    values: dict[str, object] = {}
    if path is not None:
        values.update(_read_file(Path(path)))

    if env.get(_TOKEN_ENV, "").strip():
        values["authorization_token"] = env[_TOKEN_ENV].strip()
    if env.get(_BASEURL_ENV, "").strip():
        values["baseurl"] = env[_BASEURL_ENV].strip()
    if env.get(_TIMEOUT_ENV, "").strip():
        values["timeout"] = env[_TIMEOUT_ENV].strip()

    return _build(values, source=str(path) if path is not None else "environment")


def _read_file(path: Path) -> dict[str, object]:
    """Read the ``forge:`` mapping out of a YAML settings file."""
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse settings file '{path}': {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file '{path}' must contain a mapping at the top level.")

    forge = data.get("forge", {})
    if forge is None:
        return {}
    if not isinstance(forge, dict):
        raise ConfigError(f"'forge' in '{path}' must be a mapping.")

    unknown = set(forge) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown forge setting(s) in '{path}': {', '.join(sorted(unknown))}. "
            f"Expected any of: {', '.join(sorted(_KNOWN_KEYS))}."
        )
    return dict(forge)


def _build(values: dict[str, object], *, source: str) -> ForgeSettings:
    token = values.get("authorization_token")
    baseurl = values.get("baseurl")
    cert_dir = values.get("cert_dir")
    return ForgeSettings(
        authorization_token=str(token) if token else None,
        baseurl=str(baseurl) if baseurl else None,
        timeout=_as_seconds(values.get("timeout", _DEFAULT_TIMEOUT), "timeout", source),
        connect_timeout=_as_seconds(
            values.get("connect_timeout", _DEFAULT_CONNECT_TIMEOUT), "connect_timeout", source
        ),
        cert_dir=Path(str(cert_dir)).expanduser() if cert_dir else None,
    )


def _as_seconds(value: object, key: str, source: str) -> float:
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' from {source} must be a number, got {value!r}.") from None
    if seconds <= 0:
        raise ConfigError(f"'{key}' from {source} must be positive, got {value!r}.")
    return seconds


# ─── Process-wide default ──────────────────────────────────

_default: ForgeSettings | None = None
_configured: bool = False
_default_lock = threading.Lock()


def configure(settings: ForgeSettings) -> None:
    """Install the process-wide default settings. Allowed once per process.

    Must run before anything reads :func:`default_settings`; once the default
    has been read (or lazily loaded) it is fixed. Connections already built
    keep the headers they were built with.
    """
    global _configured
    global _default

    with _default_lock:
        if _configured:
            raise ConfigError("Forge settings are already configured for this process.")
        _default = settings
        _configured = True
    logger.debug("Process-wide forge settings configured")


def default_settings() -> ForgeSettings:
    """Return the configured default, loading it from the environment on first use."""
    global _configured
    global _default

    with _default_lock:
        if _default is None:
            _default = load_settings()
            _configured = True
        return _default


def reset_default_settings() -> None:
    """Forget the process-wide default (primarily for tests)."""
    global _configured
    global _default

    with _default_lock:
        _default = None
        _configured = False
