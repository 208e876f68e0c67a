"""
Go installer — official binary archive unpacked into ``{install_dir}/go``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from oneclick.adapters.base import InstallContext, ToolInstaller
from oneclick.core.models.install import (
    Artifact,
    InstallTarget,
    ProfileEditBlock,
    VerificationResult,
)
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.data.constants import GO_HELLO_PROGRAM
from oneclick.core.services.tool_install.data.profile_maps import LEGACY_GO_WINDOWS
from oneclick.core.services.tool_install.detection.tool_version import (
    get_tool_version,
    which,
)
from oneclick.core.services.tool_install.domain.download_helpers import (
    artifact_filename,
    render_artifact_url,
)
from oneclick.core.services.tool_install.domain.errors import InstallFailed
from oneclick.core.services.tool_install.domain.version_format import parse_first_line
from oneclick.core.services.tool_install.execution.config import (
    _shell_config_line,
    expand,
    shell_path,
)
from oneclick.core.services.tool_install.execution.filesystem import (
    extract_tarball,
    remove_tree,
)
from oneclick.core.services.tool_install.execution.subprocess_runner import (
    _run_subprocess,
)
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver

logger = logging.getLogger(__name__)

PROFILE_MARKER = "oneclick go"


class GoInstaller(ToolInstaller):
    """Install the Go toolchain from golang.org (or its mirror)."""

    @property
    def name(self) -> str:
        return "go"

    @property
    def display_name(self) -> str:
        return "Go"

    def default_install_dir(self, settings: InstallerSettings) -> str:
        return settings.go.install_dir

    def version_resolver(self, ctx: InstallContext) -> VersionResolver:
        return VersionResolver(
            ctx.region.endpoints.version_url,
            parser=parse_first_line,
            prefix="go",
            timeout=ctx.settings.version_timeout,
        )

    # ── Paths ───────────────────────────────────────────────────

    @staticmethod
    def goroot(target: InstallTarget) -> Path:
        return expand(target.install_dir) / "go"

    def go_binary(self, target: InstallTarget) -> Path:
        return self.goroot(target) / "bin" / "go"

    def _env(self, target: InstallTarget, ctx: InstallContext) -> dict[str, str]:
        goroot = self.goroot(target)
        gopath = expand(ctx.settings.go.gopath)
        return {
            "GOROOT": str(goroot),
            "GOPATH": str(gopath),
            "PATH": f"{goroot}/bin:{gopath}/bin:$PATH",
        }

    # ── Pipeline steps ──────────────────────────────────────────

    def installed_version(self, target: InstallTarget, ctx: InstallContext) -> str | None:
        return get_tool_version("go", binary=str(self.go_binary(target)))

    def needs_removal(self, target: InstallTarget, ctx: InstallContext) -> bool:
        goroot = self.goroot(target)
        return goroot.exists() or goroot.is_symlink()

    def remove_existing(self, target: InstallTarget, ctx: InstallContext) -> None:
        ctx.info(f"Removing existing Go installation at {self.goroot(target)}")
        remove_tree(self.goroot(target))

    def artifacts(self, target: InstallTarget, ctx: InstallContext) -> list[Artifact]:
        endpoints = ctx.region.endpoints
        url = render_artifact_url(
            endpoints.get("artifact_template", "{base}/go{version}.{os}-{arch}.tar.gz"),
            base=endpoints.download_base.rstrip("/"),
            version=target.version,
            os=target.os,
            arch=target.arch,
        )
        return [Artifact(name=artifact_filename(url), url=url)]

    def install(
        self,
        target: InstallTarget,
        files: dict[str, Path],
        ctx: InstallContext,
    ) -> dict[str, str]:
        if len(files) != 1:
            raise InstallFailed(f"Expected one Go archive, got {len(files)}")
        archive = next(iter(files.values()))

        ctx.info(f"Extracting Go {target.version} to {expand(target.install_dir)}")
        try:
            extract_tarball(archive, expand(target.install_dir))
        except InstallFailed:
            # Do not leave a half-extracted tree behind.
            try:
                remove_tree(self.goroot(target))
            except InstallFailed as exc:
                logger.warning("Cleanup of %s failed: %s", self.goroot(target), exc.message)
            raise

        if not self.go_binary(target).is_file():
            raise InstallFailed(
                f"Archive did not contain {self.go_binary(target)}",
            )
        return self._env(target, ctx)

    def configure(self, target: InstallTarget, ctx: InstallContext) -> None:
        gopath = expand(ctx.settings.go.gopath)
        try:
            gopath.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            ctx.warn(f"Could not create GOPATH {gopath}: {exc}")

    def profile_block(self, target: InstallTarget, ctx: InstallContext) -> ProfileEditBlock:
        goroot = str(self.goroot(target))
        return ProfileEditBlock(
            marker=PROFILE_MARKER,
            lines=[
                _shell_config_line(env_var=("GOROOT", goroot)),
                _shell_config_line(env_var=("GOPATH", shell_path(ctx.settings.go.gopath))),
                _shell_config_line(path_entry="$GOROOT/bin:$GOPATH/bin"),
            ],
            legacy_windows=LEGACY_GO_WINDOWS,
        )

    def verify(self, target: InstallTarget, ctx: InstallContext) -> VerificationResult:
        env = ctx.env or self._env(target, ctx)
        version = get_tool_version("go", env=env)
        result = VerificationResult(
            found_on_path=which("go", env) is not None,
            reported_version=version or "",
        )
        if not version:
            return result

        if version != target.version:
            result.warnings.append(
                f"go on PATH reports {version}, expected {target.version}"
            )

        result.smoke_test_passed = self._smoke_test(env)
        if not result.smoke_test_passed:
            result.warnings.append("Go test program failed to run")
        return result

    def _smoke_test(self, env: dict[str, str]) -> bool:
        """Compile and run a hello-world program."""
        go = which("go", env)
        if not go:
            return False
        with tempfile.TemporaryDirectory(prefix="oneclick-go-test-") as tmp:
            Path(tmp, "main.go").write_text(GO_HELLO_PROGRAM, encoding="utf-8")
            result = _run_subprocess(
                [go, "run", "main.go"],
                cwd=tmp,
                env_overrides=env,
                timeout=120,
            )
        if not result["ok"]:
            logger.debug("Go smoke test failed: %s", result.get("stderr", ""))
            return False
        return "Hello, Go!" in result.get("stdout", "")

    def usage_hints(self, target: InstallTarget, ctx: InstallContext) -> list[str]:
        return [
            "Environment:",
            f"  GOROOT={self.goroot(target)}",
            f"  GOPATH={expand(ctx.settings.go.gopath)}",
            "",
            "Restart your terminal or run:",
            f"  source {os.path.expanduser('~/.bashrc')}",
            "",
            "Common commands:",
            "  go version              # Check Go version",
            "  go mod init <module>    # Start a module",
            "  go build                # Build current package",
            "  go run main.go          # Run Go program",
        ]
