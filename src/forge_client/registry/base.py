"""Port: Forge module release lookups."""

from __future__ import annotations

from typing import Protocol


class ForgeRegistryPort(Protocol):
    """Port for querying published module versions on a Forge."""

    @property
    def forge(self) -> str:
        """The Forge host queried."""
        ...

    def versions(self, module_name: str) -> list[str]:
        """All non-deleted versions of a module, oldest first."""
        ...

    def latest_version(self, module_name: str) -> str | None:
        """The newest non-deleted version, or None when there is none."""
        ...
