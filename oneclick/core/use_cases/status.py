"""
Status use cases — what is installed, and which region would be used.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.detection.platform import (
    PlatformInfo,
    detect_platform,
)
from oneclick.core.services.tool_install.detection.tool_version import (
    check_installed,
    detect_nvm,
)
from oneclick.core.services.tool_install.domain.errors import EnvironmentUnsupported
from oneclick.core.services.tool_install.resolver.region_resolution import RegionResolver


@dataclass
class StatusResult:
    """Host summary plus installed tool versions."""

    platform: PlatformInfo | None = None
    tools: list[dict] = field(default_factory=list)
    nvm: dict = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.platform:
            result["platform"] = {
                "os": self.platform.os,
                "arch": self.platform.arch,
                "family": self.platform.family,
                "package_manager": self.platform.package_manager,
                "distro": self.platform.distro.get("PRETTY_NAME")
                or self.platform.distro.get("NAME", ""),
            }
        result["tools"] = self.tools
        result["nvm"] = self.nvm
        return result


def get_status(settings: InstallerSettings) -> StatusResult:
    """Collect host details and installed versions.  Never raises."""
    result = StatusResult()
    try:
        result.platform = detect_platform()
    except EnvironmentUnsupported as e:
        result.error = e.message
    result.tools = check_installed()
    result.nvm = detect_nvm(settings.node.nvm_dir)
    return result


@dataclass
class RegionReport:
    """Which endpoint set a tool would use, and the evidence."""

    tool: str
    selected: str
    reason: str
    endpoints: dict
    timezone: str | None = None
    locale: str | None = None
    probe_reachable: bool | None = None

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "selected": self.selected,
            "reason": self.reason,
            "endpoints": self.endpoints,
            "signals": {
                "timezone": self.timezone,
                "locale": self.locale,
                "probe_reachable": self.probe_reachable,
            },
        }


def describe_region(tool: str, resolver: RegionResolver) -> RegionReport:
    profile = resolver.resolve()
    signals = resolver.signals
    return RegionReport(
        tool=tool,
        selected=profile.selected,
        reason=profile.reason,
        endpoints=profile.endpoints.model_dump(),
        timezone=signals.timezone if signals else None,
        locale=signals.locale if signals else None,
        probe_reachable=signals.probe_reachable if signals else None,
    )
