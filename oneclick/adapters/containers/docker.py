"""
Docker installer — Docker CE engine, Compose and daemon defaults.

How the engine gets onto the host depends on the distro: each way is a
``DockerVariant`` registered under a ``(family, package manager)`` key.
Hosts that match no key get the convenience-script variant.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform as _platform
from abc import ABC, abstractmethod
from pathlib import Path

from oneclick.adapters.base import InstallContext, ToolInstaller
from oneclick.core.models.install import Artifact, InstallTarget, VerificationResult
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.data.constants import (
    DOCKER_APT_SOURCE,
    DOCKER_CHANNEL,
    DOCKER_CONFLICTS_APT,
    DOCKER_CONFLICTS_RPM,
    DOCKER_DAEMON_DEFAULTS,
    DOCKER_KEYRING,
    DOCKER_PACKAGES,
    DOCKER_PREREQS,
)
from oneclick.core.services.tool_install.detection.platform import PlatformInfo
from oneclick.core.services.tool_install.detection.tool_version import (
    get_tool_version,
    which,
)
from oneclick.core.services.tool_install.domain.errors import (
    InstallerError,
    InstallFailed,
)
from oneclick.core.services.tool_install.domain.version_format import (
    parse_github_release_tag,
)
from oneclick.core.services.tool_install.execution.config import (
    expand,
    write_json_config_if_absent,
)
from oneclick.core.services.tool_install.execution.download import download_file
from oneclick.core.services.tool_install.execution.filesystem import (
    _run_or_raise,
    ensure_symlink,
    install_file,
    write_file,
)
from oneclick.core.services.tool_install.execution.subprocess_runner import (
    _run_subprocess,
    describe_failure,
)
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver

logger = logging.getLogger(__name__)

INSTALL_SCRIPT = "get-docker.sh"


# ── Platform variants ───────────────────────────────────────────


class DockerVariant(ABC):
    """One way of putting the Docker engine on a host."""

    name: str = ""

    def artifacts(self, ctx: InstallContext) -> list[Artifact]:
        return []

    @abstractmethod
    def install_engine(self, files: dict[str, Path], ctx: InstallContext) -> None:
        """Install the engine packages.  Raises ``InstallFailed``."""


_VARIANTS: dict[tuple[str, str | None], type[DockerVariant]] = {}


def register_variant(family: str, package_manager: str | None):
    """Class decorator adding a variant to the lookup table."""
    def decorator(cls: type[DockerVariant]) -> type[DockerVariant]:
        _VARIANTS[(family, package_manager)] = cls
        return cls
    return decorator


class ConvenienceScriptVariant(DockerVariant):
    """Run the upstream ``get.docker.com`` script."""

    name = "convenience-script"

    def artifacts(self, ctx: InstallContext) -> list[Artifact]:
        endpoints = ctx.region.endpoints
        return [Artifact(
            name=INSTALL_SCRIPT,
            url=endpoints.get("install_script"),
            fallback_url=endpoints.get("install_script_fallback") or None,
        )]

    def install_engine(self, files: dict[str, Path], ctx: InstallContext) -> None:
        script = files.get(INSTALL_SCRIPT)
        if script is None:
            raise InstallFailed("Docker install script was not downloaded")
        ctx.info("Running the Docker convenience script...")
        _run_or_raise(["sh", str(script)], "Docker installation failed", timeout=1800)


class _RepoVariant(DockerVariant):
    """Shared steps of the package-repository variants."""

    package_manager: str = ""
    conflicts: tuple[str, ...] = ()

    def _pm(self, *args: str) -> list[str]:
        return [self.package_manager, *args]

    def install_engine(self, files: dict[str, Path], ctx: InstallContext) -> None:
        ctx.info("Installing prerequisites...")
        self.install_prerequisites(ctx)

        ctx.info("Removing conflicting packages...")
        result = _run_subprocess(self._pm("remove", "-y", *self.conflicts),
                                 needs_sudo=True, timeout=600)
        if not result["ok"]:
            logger.debug("No conflicting packages removed: %s", describe_failure(result))

        ctx.info(f"Adding the Docker CE repository ({ctx.region.endpoints.name})...")
        self.add_repository(ctx)

        ctx.info("Installing Docker CE packages...")
        _run_or_raise(self._pm("install", "-y", *DOCKER_PACKAGES),
                      "Docker package installation failed", timeout=1800)

    def install_prerequisites(self, ctx: InstallContext) -> None:
        prereqs = DOCKER_PREREQS.get(self.package_manager, ())
        if prereqs:
            _run_or_raise(self._pm("install", "-y", *prereqs),
                          "Prerequisite installation failed", timeout=900)

    @abstractmethod
    def add_repository(self, ctx: InstallContext) -> None: ...


@register_variant("debian", "apt-get")
class AptRepoVariant(_RepoVariant):
    name = "apt-repository"
    package_manager = "apt-get"
    conflicts = DOCKER_CONFLICTS_APT

    def install_prerequisites(self, ctx: InstallContext) -> None:
        _run_or_raise(["apt-get", "update"], "apt-get update failed", timeout=900)
        super().install_prerequisites(ctx)

    @staticmethod
    def repo_distro(platform: PlatformInfo) -> str:
        distro_id = platform.distro.get("ID", "")
        return distro_id if distro_id in ("ubuntu", "debian") else "ubuntu"

    @staticmethod
    def codename(platform: PlatformInfo) -> str:
        codename = (platform.distro.get("VERSION_CODENAME")
                    or platform.distro.get("UBUNTU_CODENAME"))
        if codename:
            return codename
        result = _run_subprocess(["lsb_release", "-cs"])
        if result["ok"] and result["stdout"].strip():
            return result["stdout"].strip()
        raise InstallFailed("Cannot determine the distribution codename")

    def add_repository(self, ctx: InstallContext) -> None:
        repo = f"{ctx.region.endpoints.download_base}/linux/{self.repo_distro(ctx.platform)}"
        workdir = ctx.workdir or Path("/tmp")
        key_file = workdir / "docker.gpg"
        download_file(f"{repo}/gpg", key_file,
                      connect_timeout=ctx.settings.connect_timeout,
                      total_timeout=ctx.settings.transfer_timeout)
        _run_or_raise(["gpg", "--batch", "--yes", "--dearmor", "-o", DOCKER_KEYRING,
                       str(key_file)], "Cannot import the Docker GPG key")

        arch = _run_subprocess(["dpkg", "--print-architecture"])
        if not arch["ok"]:
            raise InstallFailed(f"dpkg --print-architecture failed: {describe_failure(arch)}")

        line = (f"deb [arch={arch['stdout'].strip()} signed-by={DOCKER_KEYRING}] "
                f"{repo} {self.codename(ctx.platform)} {DOCKER_CHANNEL}\n")
        write_file(Path(DOCKER_APT_SOURCE), line)
        _run_or_raise(["apt-get", "update"], "apt-get update failed", timeout=900)


@register_variant("redhat", "dnf")
class DnfRepoVariant(_RepoVariant):
    name = "dnf-repository"
    package_manager = "dnf"
    conflicts = DOCKER_CONFLICTS_RPM

    def add_repository(self, ctx: InstallContext) -> None:
        repo = f"{ctx.region.endpoints.download_base}/linux/centos/docker-ce.repo"
        _run_or_raise(["dnf", "config-manager", "--add-repo", repo],
                      "Cannot add the Docker CE repository")


@register_variant("redhat", "yum")
class YumRepoVariant(_RepoVariant):
    name = "yum-repository"
    package_manager = "yum"
    conflicts = DOCKER_CONFLICTS_RPM

    def add_repository(self, ctx: InstallContext) -> None:
        repo = f"{ctx.region.endpoints.download_base}/linux/centos/docker-ce.repo"
        _run_or_raise(["yum-config-manager", "--add-repo", repo],
                      "Cannot add the Docker CE repository")


def select_variant(platform: PlatformInfo) -> DockerVariant:
    """Pick the variant registered for the host, or the script one."""
    cls = _VARIANTS.get((platform.family, platform.package_manager),
                        ConvenienceScriptVariant)
    return cls()


# ── Installer ───────────────────────────────────────────────────


class DockerInstaller(ToolInstaller):
    """Install Docker CE, Docker Compose and a default daemon config."""

    supported_os = ("linux",)

    @property
    def name(self) -> str:
        return "docker"

    @property
    def display_name(self) -> str:
        return "Docker"

    def default_install_dir(self, settings: InstallerSettings) -> str:
        return "/usr/bin"

    def version_resolver(self, ctx: InstallContext) -> None:
        return None

    def resolve_version(self, ctx: InstallContext, explicit: str | None) -> str:
        # The engine follows the repository channel, not a pinned version.
        return DOCKER_CHANNEL

    def installed_version(self, target: InstallTarget, ctx: InstallContext) -> str | None:
        return get_tool_version("docker")

    def is_satisfied(self, target: InstallTarget, installed: str | None) -> bool:
        return installed is not None

    def artifacts(self, target: InstallTarget, ctx: InstallContext) -> list[Artifact]:
        return select_variant(ctx.platform).artifacts(ctx)

    def install(
        self,
        target: InstallTarget,
        files: dict[str, Path],
        ctx: InstallContext,
    ) -> dict[str, str]:
        variant = select_variant(ctx.platform)
        logger.info("Docker install variant: %s", variant.name)
        variant.install_engine(files, ctx)

        self._start_service(ctx)
        self._add_user_to_group(ctx)
        self._ensure_compose(ctx)
        return {}

    def _start_service(self, ctx: InstallContext) -> None:
        if not which("systemctl"):
            ctx.warn("systemctl not found; start the Docker daemon manually")
            return
        ctx.info("Starting Docker service...")
        for action in ("start", "enable"):
            result = _run_subprocess(["systemctl", action, "docker"], needs_sudo=True)
            if not result["ok"]:
                ctx.warn(f"systemctl {action} docker failed: {describe_failure(result)}")

    def _add_user_to_group(self, ctx: InstallContext) -> None:
        user = os.environ.get("SUDO_USER") or getpass.getuser()
        if not user or user == "root":
            return
        result = _run_subprocess(["usermod", "-aG", "docker", user], needs_sudo=True)
        if result["ok"]:
            ctx.warn(f"Added {user} to the docker group. "
                     "Log out and back in for it to take effect.")
        else:
            ctx.warn(f"Could not add {user} to the docker group: {describe_failure(result)}")

    def _ensure_compose(self, ctx: InstallContext) -> None:
        plugin = get_tool_version("compose-plugin")
        if plugin:
            ctx.info(f"Docker Compose plugin is installed: {plugin}")
            return
        standalone = get_tool_version("docker-compose")
        if standalone:
            ctx.info(f"Docker Compose (standalone) is installed: {standalone}")
            return

        try:
            self._install_compose_binary(ctx)
        except InstallerError as exc:
            ctx.warn(f"Docker Compose was not installed: {exc.message}")

    def _install_compose_binary(self, ctx: InstallContext) -> None:
        endpoints = ctx.region.endpoints
        resolver = VersionResolver(
            endpoints.get("compose_version_url"),
            parser=parse_github_release_tag,
            prefix="v",
            fallback=ctx.settings.docker.compose_fallback_version,
            timeout=ctx.settings.version_timeout,
        )
        version = resolver.resolve()
        for warning in resolver.warnings:
            ctx.warn(warning)

        url = (f"{endpoints.get('compose_download')}/v{version}/"
               f"docker-compose-{_platform.system()}-{_platform.machine()}")
        ctx.info(f"Installing Docker Compose {version}...")
        workdir = ctx.workdir or Path("/tmp")
        binary = workdir / "docker-compose"
        download_file(url, binary,
                      connect_timeout=ctx.settings.connect_timeout,
                      total_timeout=ctx.settings.transfer_timeout)

        dest = Path(ctx.settings.docker.compose_install_path)
        install_file(binary, dest)
        ensure_symlink(dest, Path("/usr/bin/docker-compose"))

    def configure(self, target: InstallTarget, ctx: InstallContext) -> None:
        path = expand(ctx.settings.docker.daemon_config_path)
        if not write_json_config_if_absent(path, DOCKER_DAEMON_DEFAULTS):
            ctx.info(f"{path} already exists, leaving it untouched")
            return
        ctx.info(f"Created {path}")
        if which("systemctl"):
            result = _run_subprocess(["systemctl", "restart", "docker"], needs_sudo=True)
            if not result["ok"]:
                ctx.warn(f"Docker restart failed: {describe_failure(result)}")

    def verify(self, target: InstallTarget, ctx: InstallContext) -> VerificationResult:
        version = get_tool_version("docker")
        result = VerificationResult(
            found_on_path=which("docker") is not None,
            reported_version=version or "",
        )
        if not version:
            return result

        smoke = _run_subprocess(["docker", "run", "--rm", "hello-world"],
                                needs_sudo=True, timeout=300)
        result.smoke_test_passed = smoke["ok"]
        if not smoke["ok"]:
            result.warnings.append(
                "Docker test container failed. You may need to restart your session."
            )

        if not (get_tool_version("compose-plugin") or get_tool_version("docker-compose")):
            result.warnings.append("Docker Compose is not available")
        return result

    def usage_hints(self, target: InstallTarget, ctx: InstallContext) -> list[str]:
        return [
            "Log out and back in (or run 'newgrp docker') to use docker without sudo.",
            "",
            "Common commands:",
            "  docker --version            # Check Docker version",
            "  docker ps                   # List running containers",
            "  docker images               # List images",
            "  docker run hello-world      # Test installation",
            "  docker compose up -d        # Start a compose project",
            "",
            f"Daemon config: {ctx.settings.docker.daemon_config_path}",
        ]
