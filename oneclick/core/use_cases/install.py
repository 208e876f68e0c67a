"""
Install use case — from CLI input to an orchestrated install.

Validates input, detects the host, resolves the region and the
version, then hands the resolved target to the orchestrator.
"""

from __future__ import annotations

import logging
from typing import Any

from oneclick.adapters.base import ProgressFn
from oneclick.adapters.registry import InstallerRegistry, default_registry
from oneclick.core.models.install import InstallTarget
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.data.endpoints import endpoint_sets
from oneclick.core.services.tool_install.detection.platform import (
    PlatformInfo,
    detect_platform,
)
from oneclick.core.services.tool_install.detection.region_signals import probe_endpoint
from oneclick.core.services.tool_install.domain.version_format import validate_version
from oneclick.core.services.tool_install.orchestration.orchestrator import (
    InstallOrchestrator,
    InstallResult,
)
from oneclick.core.services.tool_install.resolver.region_resolution import (
    ProbeFn,
    RegionResolver,
)

logger = logging.getLogger(__name__)


def build_region_resolver(
    tool: str,
    settings: InstallerSettings,
    *,
    probe: ProbeFn | None = probe_endpoint,
) -> RegionResolver:
    """RegionResolver over the (possibly overridden) endpoint tables."""
    primary, mirror = endpoint_sets(tool, settings.endpoints)
    return RegionResolver(
        primary,
        mirror,
        override=settings.region,
        probe=probe,
        probe_timeout=settings.probe_timeout,
    )


def install_tool(
    tool: str,
    version: str | None = None,
    *,
    settings: InstallerSettings,
    force: bool = False,
    install_dir: str | None = None,
    options: dict[str, Any] | None = None,
    progress: ProgressFn | None = None,
    registry: InstallerRegistry | None = None,
    platform: PlatformInfo | None = None,
    region_resolver: RegionResolver | None = None,
) -> InstallResult:
    """Install ``tool``.

    Args:
        tool: Registered tool name.
        version: Explicit version; None resolves the latest.
        settings: Loaded settings.
        force: Reinstall even if the target version is present.
        install_dir: Overrides the installer's default location.
        options: Tool-specific flags passed to the installer.
        progress: ``progress(kind, message)`` callback.

    Raises:
        InstallerError: any fatal failure, already classified.
    """
    options = dict(options or {})
    version = (version or "").strip() or None
    installer = (registry or default_registry()).get(tool)

    # Bad input is rejected before anything touches the host.
    if version and not options.get("lts"):
        validate_version(version)

    platform = platform or detect_platform()
    installer.check_platform(platform)

    region = (region_resolver or build_region_resolver(tool, settings)).resolve()

    orchestrator = InstallOrchestrator(
        installer,
        settings=settings,
        platform=platform,
        region=region,
        progress=progress,
        options=options,
    )
    ctx = orchestrator.context(force)
    ctx.info(
        f"Detected system: {platform.os}-{platform.arch}; "
        f"using {region.endpoints.name} endpoints ({region.reason})"
    )

    target = InstallTarget(
        tool=tool,
        requested_version=version,
        install_dir=install_dir or installer.default_install_dir(settings),
        os=platform.os,
        arch=platform.arch,
    )
    target.set_resolved_version(installer.resolve_version(ctx, version))
    ctx.info(f"Target version: {target.version}")

    return orchestrator.install(target, force, ctx=ctx)
