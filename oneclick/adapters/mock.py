"""
Mock installer — universal test double for the install pipeline.

Simulates a tool without touching the host.  Configurable installed
version, artifacts, per-step failures and verification outcome.
"""

from __future__ import annotations

from pathlib import Path

from oneclick.adapters.base import InstallContext, ToolInstaller
from oneclick.core.models.install import (
    Artifact,
    InstallTarget,
    ProfileEditBlock,
    VerificationResult,
)
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.domain.errors import InstallerError
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver


class MockInstaller(ToolInstaller):
    """Universal mock installer for testing.

    By default it reports nothing installed, downloads one artifact,
    "installs" by remembering the version, and verifies successfully.
    """

    def __init__(
        self,
        tool_name: str = "mock",
        *,
        installed: str | None = None,
        artifact_url: str = "https://example.invalid/mock-{version}.tar.gz",
        fallback_url: str | None = None,
        smoke_test_passes: bool = True,
        profile_lines: list[str] | None = None,
    ):
        self._name = tool_name
        self.installed = installed
        self.artifact_url = artifact_url
        self.fallback_url = fallback_url
        self.smoke_test_passes = smoke_test_passes
        self.profile_lines = profile_lines
        self.binary_present_after_install = True
        self._failures: dict[str, InstallerError] = {}
        self._call_log: list[str] = []
        self.received_files: dict[str, Path] = {}
        self.received_env: dict[str, str] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[str]:
        """Names of the pipeline steps this mock has run, in order."""
        return self._call_log

    def set_failure(self, step: str, error: InstallerError) -> None:
        """Make ``step`` (e.g. ``"install"``) raise ``error``."""
        self._failures[step] = error

    def _step(self, step: str) -> None:
        self._call_log.append(step)
        if step in self._failures:
            raise self._failures[step]

    # ── ToolInstaller ───────────────────────────────────────────

    def default_install_dir(self, settings: InstallerSettings) -> str:
        return "/opt/mock"

    def version_resolver(self, ctx: InstallContext) -> VersionResolver:
        return VersionResolver(ctx.region.endpoints.version_url)

    def installed_version(self, target: InstallTarget, ctx: InstallContext) -> str | None:
        self._step("installed_version")
        return self.installed

    def needs_removal(self, target: InstallTarget, ctx: InstallContext) -> bool:
        return self.installed is not None

    def remove_existing(self, target: InstallTarget, ctx: InstallContext) -> None:
        self._step("remove_existing")
        self.installed = None

    def artifacts(self, target: InstallTarget, ctx: InstallContext) -> list[Artifact]:
        self._step("artifacts")
        if not self.artifact_url:
            return []
        url = self.artifact_url.format(version=target.version)
        fallback = self.fallback_url.format(version=target.version) if self.fallback_url else None
        return [Artifact(name=url.rsplit("/", 1)[-1], url=url, fallback_url=fallback)]

    def install(
        self,
        target: InstallTarget,
        files: dict[str, Path],
        ctx: InstallContext,
    ) -> dict[str, str]:
        self._step("install")
        self.received_files = dict(files)
        if self.binary_present_after_install:
            self.installed = target.version
        return {"MOCK_HOME": target.install_dir}

    def configure(self, target: InstallTarget, ctx: InstallContext) -> None:
        self._step("configure")
        self.received_env = dict(ctx.env)

    def profile_block(self, target: InstallTarget, ctx: InstallContext) -> ProfileEditBlock | None:
        if self.profile_lines is None:
            return None
        return ProfileEditBlock(marker=f"oneclick {self._name}", lines=self.profile_lines)

    def verify(self, target: InstallTarget, ctx: InstallContext) -> VerificationResult:
        self._step("verify")
        if self.installed is None:
            return VerificationResult()
        result = VerificationResult(
            found_on_path=True,
            reported_version=self.installed,
            smoke_test_passed=self.smoke_test_passes,
        )
        if not self.smoke_test_passes:
            result.warnings.append("mock smoke test failed")
        return result
