"""
L1 Domain — OS / architecture support matrix (pure).

Maps raw ``uname`` values onto the names used in download URLs.
No I/O, no subprocess.
"""

from __future__ import annotations

from oneclick.core.services.tool_install.domain.errors import EnvironmentUnsupported

SUPPORTED_OS = ("linux", "darwin")

# uname -m → Go-style arch name
_ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "armv6l",
    "armv7l": "armv6l",
    "i386": "386",
    "i686": "386",
}


def normalize_os(system: str) -> str:
    """``Linux`` → ``linux``; unknown systems raise."""
    name = system.strip().lower()
    if name not in SUPPORTED_OS:
        raise EnvironmentUnsupported(f"Unsupported operating system: {system}")
    return name


def normalize_arch(machine: str) -> str:
    """``x86_64`` → ``amd64``; unknown machines raise."""
    arch = _ARCH_MAP.get(machine.strip().lower())
    if arch is None:
        raise EnvironmentUnsupported(f"Unsupported architecture: {machine}")
    return arch


def support_matrix() -> list[tuple[str, str]]:
    """Every (os, arch) pair an installer may be asked to handle."""
    arches = sorted(set(_ARCH_MAP.values()))
    return [(os_name, arch) for os_name in SUPPORTED_OS for arch in arches]
