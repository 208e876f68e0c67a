"""
Installer registry — central lookup for all tool installers.

The use case never instantiates installers itself; it asks the
registry by tool name.
"""

from __future__ import annotations

import logging

from oneclick.adapters.base import ToolInstaller
from oneclick.core.services.tool_install.domain.errors import InvalidInput

logger = logging.getLogger(__name__)


class InstallerRegistry:
    """Register and look up installers by tool name."""

    def __init__(self) -> None:
        self._installers: dict[str, ToolInstaller] = {}

    def register(self, installer: ToolInstaller) -> None:
        name = installer.name
        if name in self._installers:
            logger.warning("Overwriting existing installer: %s", name)
        self._installers[name] = installer
        logger.debug("Registered installer: %s", name)

    def unregister(self, name: str) -> None:
        self._installers.pop(name, None)

    def get(self, name: str) -> ToolInstaller:
        """Look up an installer.

        Raises:
            InvalidInput: no installer registered under ``name``.
        """
        installer = self._installers.get(name)
        if installer is None:
            raise InvalidInput(
                f"Unknown tool: {name}",
                hint=f"Available: {', '.join(self.list_installers())}",
            )
        return installer

    def list_installers(self) -> list[str]:
        return sorted(self._installers)


def default_registry() -> InstallerRegistry:
    """Registry with every built-in installer."""
    from oneclick.adapters.containers.docker import DockerInstaller
    from oneclick.adapters.languages.go import GoInstaller
    from oneclick.adapters.languages.node import NodeInstaller

    registry = InstallerRegistry()
    registry.register(GoInstaller())
    registry.register(DockerInstaller())
    registry.register(NodeInstaller())
    return registry
