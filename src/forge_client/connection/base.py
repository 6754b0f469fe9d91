"""Port: building connections to a Forge."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from forge_client.connection.builder import ForgeConnection


class ConnectionProviderPort(Protocol):
    """Port for obtaining a ready-to-use connection bound to a base URL."""

    def make_connection(self, base_url: str) -> ForgeConnection:
        """Build a new, independent connection for ``base_url``."""
        ...
