"""forge-client: published-release lookups against a Puppet Forge.

The library core is :class:`forge_client.registry.client.ForgeClient`;
``main`` serves the same lookups as MCP tools over stdio.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

# Reported in the User-Agent when running from a source checkout.
_LOCAL_VERSION_FALLBACK = "0.0.0+local"


def _resolve_version() -> str:
    """Version of the installed ``forge-client`` distribution, or the local fallback."""
    try:
        return _distribution_version("forge-client")
    except PackageNotFoundError:
        return _LOCAL_VERSION_FALLBACK


__version__ = _resolve_version()


def main() -> None:
    """Run the forge-client MCP server on stdio (the ``forge-client`` script)."""
    from forge_client.server import mcp

    mcp.run(transport="stdio")
