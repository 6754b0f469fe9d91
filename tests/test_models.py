"""Tests for domain models."""

from __future__ import annotations

import dataclasses

import pytest

from forge_client.models import ForgeEndpoint, Release


class TestForgeEndpoint:
    def test_base_url_defaults_to_https(self):
        assert ForgeEndpoint(host="forgeapi.puppetlabs.com").base_url == (
            "https://forgeapi.puppetlabs.com"
        )

    def test_base_url_keeps_scheme_and_port(self):
        endpoint = ForgeEndpoint(host="localhost:8080", scheme="http")
        assert endpoint.base_url == "http://localhost:8080"

    def test_base_url_includes_path_prefix(self):
        endpoint = ForgeEndpoint(host="forge.example.com", path="/api")
        assert endpoint.base_url == "https://forge.example.com/api"

    def test_is_immutable(self):
        endpoint = ForgeEndpoint(host="forgeapi.puppetlabs.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            endpoint.host = "elsewhere.example"  # type: ignore[misc]


class TestRelease:
    def test_not_deleted_without_timestamp(self):
        assert Release(version="1.0.0").is_deleted is False

    def test_deleted_with_timestamp(self):
        assert Release(version="1.0.0", deleted_at="2020-01-01").is_deleted is True
