"""Shared plumbing for the Forge lookup tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

if TYPE_CHECKING:
    from forge_client.server import AppContext


def get_context(ctx: Context) -> AppContext:
    """Return the AppContext that ``app_lifespan`` installed for this server.

    Raises:
        TypeError: If the tool runs on a server whose lifespan yields
            something else, so the Forge client is unavailable.
    """
    from forge_client.server import AppContext

    app = ctx.request_context.lifespan_context
    if isinstance(app, AppContext):
        return app
    raise TypeError(
        f"Tool needs the forge-client AppContext, got {type(app).__name__}; "
        "build the server with forge_client.server.app_lifespan."
    )
