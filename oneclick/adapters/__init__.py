"""
Installers — per-tool strategies behind the ``ToolInstaller`` protocol.
"""

from oneclick.adapters.base import InstallContext, ToolInstaller
from oneclick.adapters.registry import InstallerRegistry, default_registry

__all__ = ["InstallContext", "InstallerRegistry", "ToolInstaller", "default_registry"]
