"""Tests for server.py — composition root and lifespan."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx

from forge_client.registry.client import ForgeClient
from forge_client.server import AppContext, app_lifespan, build_forge_client, mcp
from forge_client.settings import ForgeSettings, configure


class TestBuildForgeClient:
    def test_defaults_to_public_forge(self):
        client = build_forge_client(ForgeSettings())
        assert client.endpoint.base_url == "https://forgeapi.puppetlabs.com"

    def test_uses_configured_baseurl(self):
        client = build_forge_client(ForgeSettings(baseurl="http://localhost:8080"))
        assert client.endpoint.base_url == "http://localhost:8080"

    def test_connection_carries_configured_token(self):
        client = build_forge_client(
            ForgeSettings(baseurl="http://localhost:8080", authorization_token="abc")
        )
        try:
            assert client.conn.headers["Authorization"] == "abc"
        finally:
            client.close()


class TestAppLifespan:
    async def test_yields_context_from_default_settings(self):
        settings = ForgeSettings(baseurl="http://localhost:8080")
        configure(settings)

        async with app_lifespan(MagicMock()) as ctx:
            assert isinstance(ctx, AppContext)
            assert ctx.settings is settings
            assert isinstance(ctx.forge, ForgeClient)
            assert ctx.forge.forge == "localhost:8080"

    async def test_connection_closed_after_lifespan(self):
        configure(ForgeSettings(baseurl="http://localhost:8080"))

        async with app_lifespan(MagicMock()) as ctx:
            conn = ctx.forge.conn
            assert isinstance(conn.http, httpx.Client)

        assert conn.http.is_closed


class TestToolRegistration:
    async def test_tools_are_registered(self):
        tools = await mcp.list_tools()
        names = {tool.name for tool in tools}
        assert names == {"module_versions", "latest_module_version"}
