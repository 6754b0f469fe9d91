"""module_versions / latest_module_version tools -- release lookups on the Forge."""

from __future__ import annotations

import asyncio

from mcp.server.fastmcp import Context

from forge_client.errors import ForgeError
from forge_client.tools._helpers import get_context


async def module_versions(module_name: str, ctx: Context) -> dict[str, object]:
    """List every published, non-deleted version of a Puppet Forge module.

    Soft-deleted releases are never included. An unpublished module yields
    an empty list, not an error.

    Args:
        module_name: Fully qualified module name, e.g. "puppetlabs/stdlib"
            or "puppetlabs-stdlib".

    Returns:
        Dict with: success, module, forge, and versions (oldest first,
        newest last).
    """
    try:
        app = get_context(ctx)
        versions = await asyncio.to_thread(app.forge.versions, module_name)
        return {
            "success": True,
            "module": module_name,
            "forge": app.forge.forge,
            "versions": versions,
        }
    except (ForgeError, ValueError) as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in module_versions: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}


async def latest_module_version(module_name: str, ctx: Context) -> dict[str, object]:
    """Find the newest published version of a Puppet Forge module.

    Args:
        module_name: Fully qualified module name, e.g. "puppetlabs/stdlib".

    Returns:
        Dict with: success, module, forge, and latest_version (null when the
        module has no non-deleted releases).
    """
    try:
        app = get_context(ctx)
        latest = await asyncio.to_thread(app.forge.latest_version, module_name)
        return {
            "success": True,
            "module": module_name,
            "forge": app.forge.forge,
            "latest_version": latest,
        }
    except (ForgeError, ValueError) as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in latest_module_version: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
