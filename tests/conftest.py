"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from forge_client.settings import reset_default_settings

_FORGE_ENV_VARS = (
    "FORGE_CLIENT_CONFIG",
    "FORGE_AUTHORIZATION_TOKEN",
    "FORGE_BASEURL",
    "FORGE_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _isolate_forge_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test with no process-wide settings and no FORGE_* environment."""
    for name in _FORGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_default_settings()
    yield
    reset_default_settings()
