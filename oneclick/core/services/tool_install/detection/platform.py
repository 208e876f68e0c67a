"""
L3 Detection — Host platform.

Read-only probes: OS, architecture, distro family, package manager.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from oneclick.core.services.tool_install.domain.platform_matrix import (
    normalize_arch,
    normalize_os,
)

logger = logging.getLogger(__name__)

# Probe order matters: dnf is preferred over its yum compatibility shim.
_PACKAGE_MANAGERS = ("apt-get", "dnf", "yum")


@dataclass(frozen=True)
class PlatformInfo:
    """Everything the installers need to know about the host."""

    os: str
    arch: str
    machine: str
    family: str = "other"            # debian | redhat | other
    package_manager: str | None = None
    distro: dict[str, str] = field(default_factory=dict)
    is_root: bool = False


def detect_package_manager() -> str | None:
    for pm in _PACKAGE_MANAGERS:
        if shutil.which(pm):
            return pm
    return None


def detect_family(root: Path = Path("/")) -> str:
    """Classify the distro from its marker files."""
    if (root / "etc" / "debian_version").exists():
        return "debian"
    if (root / "etc" / "redhat-release").exists():
        return "redhat"
    return "other"


def read_os_release(path: Path = Path("/etc/os-release")) -> dict[str, str]:
    """Parse ``/etc/os-release`` into a dict (empty when absent)."""
    info: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return info
    for line in text.splitlines():
        if "=" not in line or line.lstrip().startswith("#"):
            continue
        key, _, value = line.partition("=")
        info[key.strip()] = value.strip().strip('"')
    return info


def detect_platform() -> PlatformInfo:
    """Detect the host.

    Raises:
        EnvironmentUnsupported: unknown OS or architecture.
    """
    system = platform.system()
    machine = platform.machine()
    os_name = normalize_os(system)
    arch = normalize_arch(machine)

    family = detect_family() if os_name == "linux" else "other"
    distro = read_os_release() if os_name == "linux" else {}
    info = PlatformInfo(
        os=os_name,
        arch=arch,
        machine=machine,
        family=family,
        package_manager=detect_package_manager(),
        distro=distro,
        is_root=hasattr(os, "geteuid") and os.geteuid() == 0,
    )
    logger.info("Detected system: %s-%s (%s, pm=%s)",
                info.os, info.arch, info.family, info.package_manager)
    return info
