"""MCP server that answers Puppet Forge release questions."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from forge_client.connection.builder import DefaultConnectionProvider
from forge_client.registry.base import ForgeRegistryPort
from forge_client.registry.client import DEFAULT_FORGE, ForgeClient
from forge_client.settings import ForgeSettings, default_settings
from forge_client.tools.versions import latest_module_version, module_versions


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations."""

    settings: ForgeSettings
    forge: ForgeRegistryPort


def build_forge_client(settings: ForgeSettings) -> ForgeClient:
    """The composition root: one ForgeClient per server, bound to ``settings``."""
    return ForgeClient(
        settings.baseurl or DEFAULT_FORGE,
        provider=DefaultConnectionProvider(settings=settings),
    )


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Build the Forge client for the server's lifetime and close it on exit."""
    settings = default_settings()
    with build_forge_client(settings) as forge:
        yield AppContext(settings=settings, forge=forge)


mcp = FastMCP(
    "forge-client",
    instructions=(
        "forge-client looks up published Puppet Forge module releases.\n\n"
        "- **module_versions** -- every non-deleted version of a module, oldest first.\n"
        "- **latest_module_version** -- the newest non-deleted version, or null.\n\n"
        "Module names are fully qualified: 'author/name' or 'author-name'."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(module_versions)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(latest_module_version)
