"""
L5 Orchestration — Install state machine.

Drives one installer through::

    START → CHECK_EXISTING → (SKIP | REMOVE_OLD) → DOWNLOAD → INSTALL
          → CONFIGURE → VERIFY → DONE

with ``FAILED`` reachable from every step.  Any ``InstallerError``
moves the machine to FAILED and is re-raised unchanged.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from oneclick.adapters.base import InstallContext, ProgressFn, ToolInstaller
from oneclick.core.models.install import (
    Artifact,
    InstallTarget,
    RegionProfile,
    VerificationResult,
)
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.detection.platform import PlatformInfo
from oneclick.core.services.tool_install.domain.errors import (
    DownloadFailed,
    InstallerError,
    InstallFailed,
)
from oneclick.core.services.tool_install.execution.download import download_file
from oneclick.core.services.tool_install.execution.profile_writer import (
    ProfileEnvironmentWriter,
)

logger = logging.getLogger(__name__)

_MIRROR_LAG_HINT = "The mirror may lag upstream; retry with --region primary"


class InstallState(str, Enum):
    START = "START"
    CHECK_EXISTING = "CHECK_EXISTING"
    SKIP = "SKIP"
    REMOVE_OLD = "REMOVE_OLD"
    DOWNLOAD = "DOWNLOAD"
    INSTALL = "INSTALL"
    CONFIGURE = "CONFIGURE"
    VERIFY = "VERIFY"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class InstallResult:
    """Outcome of one orchestrated install."""

    tool: str
    version: str
    install_dir: str = ""
    region: str = ""
    skipped: bool = False
    states: list[InstallState] = field(default_factory=list)
    verification: VerificationResult = field(default_factory=VerificationResult)
    profiles_updated: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.states) and self.states[-1] == InstallState.DONE

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "tool": self.tool,
            "version": self.version,
            "install_dir": self.install_dir,
            "region": self.region,
            "skipped": self.skipped,
            "states": [s.value for s in self.states],
            "verification": self.verification.model_dump(),
            "profiles_updated": self.profiles_updated,
            "warnings": self.warnings,
        }


class InstallOrchestrator:
    """Run an installer through the install state machine.

    Args:
        installer: Tool strategy.
        settings: Loaded settings.
        platform: Detected host.
        region: Selected endpoint set for this run.
        progress: ``progress(kind, message)`` callback; ``kind`` is a
            state name, ``"info"`` or ``"warning"``.
        writer: Profile writer (one per run).
        download: ``download(url, dest, connect_timeout=, total_timeout=)``.
        options: Tool-specific flags (``lts``, ``no_npm_config``).
    """

    def __init__(
        self,
        installer: ToolInstaller,
        *,
        settings: InstallerSettings,
        platform: PlatformInfo,
        region: RegionProfile,
        progress: ProgressFn | None = None,
        writer: ProfileEnvironmentWriter | None = None,
        download: Callable[..., Any] = download_file,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.installer = installer
        self.settings = settings
        self.platform = platform
        self.region = region
        self.progress = progress
        self.writer = writer or ProfileEnvironmentWriter(backup=settings.backup_profiles)
        self._download = download
        self.options = dict(options or {})
        self.history: list[InstallState] = []
        self.downloads: list[str] = []

    def context(self, force: bool = False) -> InstallContext:
        return InstallContext(
            settings=self.settings,
            platform=self.platform,
            region=self.region,
            force=force,
            options=self.options,
            progress=self.progress,
        )

    def _enter(self, state: InstallState, message: str = "") -> None:
        self.history.append(state)
        logger.debug("%s → %s", self.installer.name, state.value)
        if message:
            logger.info("%s", message)
            if self.progress:
                self.progress(state.value, message)

    # ── Entry point ─────────────────────────────────────────────

    def install(self, target: InstallTarget, force: bool = False,
                ctx: InstallContext | None = None) -> InstallResult:
        """Install ``target`` (whose version must already be resolved).

        Raises:
            InstallerError: any fatal step; the machine ends in FAILED.
        """
        ctx = ctx or self.context(force)
        ctx.force = force
        tool = self.installer.display_name
        self.history = []
        result = InstallResult(
            tool=self.installer.name,
            version=target.version,
            install_dir=target.install_dir,
            region=self.region.selected,
            states=self.history,
            warnings=ctx.warnings,
        )

        self._enter(InstallState.START)
        try:
            self._enter(InstallState.CHECK_EXISTING,
                        f"Checking for an existing {tool} installation...")
            installed = self.installer.installed_version(target, ctx)
            if installed:
                ctx.info(f"{tool} {installed} is already installed")

            if not force and self.installer.is_satisfied(target, installed):
                self._enter(
                    InstallState.SKIP,
                    f"Target version {target.version} is already installed. "
                    "Use --force to reinstall.",
                )
                result.skipped = True
                result.verification = VerificationResult(
                    found_on_path=True, reported_version=installed or "",
                )
                self._enter(InstallState.DONE)
                return result

            if self.installer.needs_removal(target, ctx):
                self._enter(InstallState.REMOVE_OLD,
                            f"Removing existing {tool} installation...")
                self.installer.remove_existing(target, ctx)

            workdir = Path(tempfile.mkdtemp(prefix=f"oneclick-{self.installer.name}-"))
            ctx.workdir = workdir
            try:
                self._enter(InstallState.DOWNLOAD, f"Downloading {tool} {target.version}...")
                files = self._fetch_artifacts(
                    self.installer.artifacts(target, ctx), workdir, ctx,
                )

                self._enter(InstallState.INSTALL, f"Installing {tool} {target.version}...")
                post_env = self.installer.install(target, files, ctx)
                ctx.env.update(post_env or {})
            finally:
                shutil.rmtree(workdir, ignore_errors=True)
                ctx.workdir = None

            self._enter(InstallState.CONFIGURE, f"Configuring {tool}...")
            self.installer.configure(target, ctx)
            block = self.installer.profile_block(target, ctx)
            if block is not None:
                already = len(self.writer.updated)
                self.writer.apply(self.settings.profile_targets, block)
                result.profiles_updated = self.writer.updated[already:]
                for path in result.profiles_updated:
                    ctx.info(f"Updated {path}")

            self._enter(InstallState.VERIFY, f"Verifying {tool} installation...")
            verification = self.installer.verify(target, ctx)
            if not verification.found_on_path or not verification.reported_version:
                raise InstallFailed(
                    f"{tool} command not found after installation",
                    hint="Restart your terminal or source your shell profile",
                )
            for warning in verification.warnings:
                ctx.warn(warning)
            result.verification = verification
            result.hints = self.installer.usage_hints(target, ctx)

            self._enter(InstallState.DONE,
                        f"{tool} {verification.reported_version} installed successfully")
            return result
        except InstallerError as exc:
            self._enter(InstallState.FAILED)
            logger.error("%s install failed: %s", self.installer.name, exc.message)
            raise

    # ── Download ────────────────────────────────────────────────

    def _fetch_artifacts(
        self,
        artifacts: list[Artifact],
        workdir: Path,
        ctx: InstallContext,
    ) -> dict[str, Path]:
        files: dict[str, Path] = {}
        for artifact in artifacts:
            dest = workdir / artifact.name
            try:
                try:
                    self._fetch(artifact.url, dest, ctx)
                except DownloadFailed as exc:
                    if not artifact.fallback_url:
                        raise
                    ctx.warn(f"{exc.message}; trying {artifact.fallback_url}")
                    self._fetch(artifact.fallback_url, dest, ctx)
            except DownloadFailed as exc:
                if self.region.is_mirror and not exc.hint:
                    raise DownloadFailed(exc.message, hint=_MIRROR_LAG_HINT) from exc
                raise
            files[artifact.name] = dest
        return files

    def _fetch(self, url: str, dest: Path, ctx: InstallContext) -> None:
        ctx.info(f"Downloading from {url}")
        self.downloads.append(url)
        self._download(
            url,
            dest,
            connect_timeout=self.settings.connect_timeout,
            total_timeout=self.settings.transfer_timeout,
        )
