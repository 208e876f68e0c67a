"""
Installer base — the protocol contract between orchestrator and tools.

The orchestrator only talks to tools through this interface, never
directly to package managers or upstream installers.  Each concrete
installer is one strategy: Go unpacks an archive, Docker drives the
system package manager, Node runs nvm.

To add a tool:
    1. Subclass ToolInstaller
    2. Implement the abstract methods
    3. Register it in the InstallerRegistry
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from oneclick.core.models.install import (
    Artifact,
    InstallTarget,
    ProfileEditBlock,
    RegionProfile,
    VerificationResult,
)
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.detection.platform import PlatformInfo
from oneclick.core.services.tool_install.domain.errors import EnvironmentUnsupported
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver

logger = logging.getLogger(__name__)

ProgressFn = Callable[[str, str], None]


@dataclass
class InstallContext:
    """Everything an installer needs during one run.

    ``env`` accumulates the environment produced by the install step
    (``post_env``) so later steps find the fresh binaries without a
    new shell.
    """

    settings: InstallerSettings
    platform: PlatformInfo
    region: RegionProfile
    force: bool = False
    options: dict[str, Any] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    progress: ProgressFn | None = None
    # scratch directory of the current run, removed by the orchestrator
    workdir: Path | None = None

    def info(self, message: str) -> None:
        logger.info("%s", message)
        if self.progress:
            self.progress("info", message)

    def warn(self, message: str) -> None:
        logger.warning("%s", message)
        self.warnings.append(message)
        if self.progress:
            self.progress("warning", message)


class ToolInstaller(ABC):
    """Abstract base class for all tool installers."""

    # Operating systems this installer handles.
    supported_os: tuple[str, ...] = ("linux", "darwin")

    @property
    @abstractmethod
    def name(self) -> str:
        """The tool identifier (e.g., 'go', 'docker', 'node')."""

    @property
    def display_name(self) -> str:
        return self.name

    def check_platform(self, platform: PlatformInfo) -> None:
        """Raise ``EnvironmentUnsupported`` if the host is out of scope."""
        if platform.os not in self.supported_os:
            raise EnvironmentUnsupported(
                f"{self.display_name} installer does not support {platform.os}"
            )

    @abstractmethod
    def default_install_dir(self, settings: InstallerSettings) -> str:
        """Where the tool lives when no override is given."""

    @abstractmethod
    def version_resolver(self, ctx: InstallContext) -> VersionResolver | None:
        """Build the resolver for this tool, or None if unversioned."""

    def resolve_version(self, ctx: InstallContext, explicit: str | None) -> str:
        resolver = self.version_resolver(ctx)
        if resolver is None:
            raise EnvironmentUnsupported(f"{self.display_name} has no version source")
        version = resolver.resolve(explicit)
        for warning in resolver.warnings:
            ctx.warn(warning)
        return version

    @abstractmethod
    def installed_version(self, target: InstallTarget, ctx: InstallContext) -> str | None:
        """Version currently installed, or None."""

    def is_satisfied(self, target: InstallTarget, installed: str | None) -> bool:
        """Whether the existing install already meets the target."""
        return installed is not None and installed == target.resolved_version

    def needs_removal(self, target: InstallTarget, ctx: InstallContext) -> bool:
        return False

    def remove_existing(self, target: InstallTarget, ctx: InstallContext) -> None:
        """Delete the previous install.  Destructive, no backup."""

    def artifacts(self, target: InstallTarget, ctx: InstallContext) -> list[Artifact]:
        """Files the DOWNLOAD step must fetch before ``install``."""
        return []

    @abstractmethod
    def install(
        self,
        target: InstallTarget,
        files: dict[str, Path],
        ctx: InstallContext,
    ) -> dict[str, str]:
        """Install the tool from the downloaded ``files``.

        Returns:
            Environment the installed tool needs (``post_env``).

        Raises:
            InstallFailed: extraction or installer error.
        """

    def configure(self, target: InstallTarget, ctx: InstallContext) -> None:
        """Write default runtime configuration, never overwriting."""

    def profile_block(
        self, target: InstallTarget, ctx: InstallContext,
    ) -> ProfileEditBlock | None:
        return None

    @abstractmethod
    def verify(self, target: InstallTarget, ctx: InstallContext) -> VerificationResult:
        """Check the binary and, where feasible, run a smoke test."""

    def usage_hints(self, target: InstallTarget, ctx: InstallContext) -> list[str]:
        """Lines printed after a successful install."""
        return []

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
