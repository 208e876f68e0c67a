"""
Node.js installer — nvm first, then ``nvm install`` of the target version.

nvm owns the Node versions under ``$NVM_DIR/versions/node``; this
installer only bootstraps nvm, drives it, and wires the shell profile.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from oneclick.adapters.base import InstallContext, ToolInstaller
from oneclick.core.models.install import (
    Artifact,
    InstallTarget,
    ProfileEditBlock,
    VerificationResult,
)
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.data.profile_maps import LEGACY_NODE_WINDOWS
from oneclick.core.services.tool_install.detection.tool_version import (
    detect_nvm,
    get_tool_version,
    which,
)
from oneclick.core.services.tool_install.domain.errors import InstallFailed
from oneclick.core.services.tool_install.domain.version_format import parse_node_lts_index
from oneclick.core.services.tool_install.execution.config import (
    _shell_config_line,
    expand,
    merge_npmrc,
    shell_path,
)
from oneclick.core.services.tool_install.execution.subprocess_runner import (
    _run_subprocess,
    describe_failure,
)
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver

logger = logging.getLogger(__name__)

PROFILE_MARKER = "oneclick node"
NVM_SCRIPT = "nvm-install.sh"

# .npmrc key → endpoint extra, set on the mirror only
_NPMRC_MIRROR_KEYS = {
    "registry": "npm_registry",
    "disturl": "npm_disturl",
    "electron_mirror": "npm_electron_mirror",
    "sass_binary_site": "npm_sass_binary_site",
    "phantomjs_cdnurl": "npm_phantomjs_cdnurl",
}

_GIT_INSTALL: dict[str, list[list[str]]] = {
    "apt-get": [["apt-get", "update"], ["apt-get", "install", "-y", "git"]],
    "dnf": [["dnf", "install", "-y", "git"]],
    "yum": [["yum", "install", "-y", "git"]],
}


class NodeInstaller(ToolInstaller):
    """Install Node.js and npm through nvm."""

    @property
    def name(self) -> str:
        return "node"

    @property
    def display_name(self) -> str:
        return "Node.js"

    def default_install_dir(self, settings: InstallerSettings) -> str:
        return settings.node.nvm_dir

    def version_resolver(self, ctx: InstallContext) -> VersionResolver:
        return VersionResolver(
            ctx.region.endpoints.version_url,
            parser=parse_node_lts_index,
            prefix="v",
            fallback=ctx.settings.node.fallback_version,
            timeout=ctx.settings.version_timeout,
        )

    def resolve_version(self, ctx: InstallContext, explicit: str | None) -> str:
        if ctx.options.get("lts") and explicit:
            ctx.info(f"--lts given, ignoring requested version {explicit}")
            explicit = None
        return super().resolve_version(ctx, explicit)

    # ── Helpers ─────────────────────────────────────────────────

    @staticmethod
    def nvm_dir(target: InstallTarget) -> Path:
        return expand(target.install_dir)

    @staticmethod
    def mirror_env(ctx: InstallContext) -> dict[str, str]:
        if not ctx.region.is_mirror:
            return {}
        endpoints = ctx.region.endpoints
        env = {"NVM_NODEJS_ORG_MIRROR": endpoints.download_base}
        if endpoints.get("iojs_mirror"):
            env["NVM_IOJS_ORG_MIRROR"] = endpoints.get("iojs_mirror")
        return env

    def _nvm(self, target: InstallTarget, ctx: InstallContext, command: str,
             *, timeout: float = 900) -> dict:
        """Run ``command`` in a bash with nvm sourced."""
        nvm_dir = self.nvm_dir(target)
        script = f'. "$NVM_DIR/nvm.sh" && {command}'
        return _run_subprocess(
            ["bash", "-c", script],
            env_overrides={"NVM_DIR": str(nvm_dir), **self.mirror_env(ctx)},
            timeout=timeout,
        )

    def _ensure_git(self, ctx: InstallContext) -> None:
        if which("git"):
            return
        commands = _GIT_INSTALL.get(ctx.platform.package_manager or "")
        if not commands:
            ctx.warn("Git not found. Some npm packages may require git.")
            return
        ctx.info("Installing git...")
        for cmd in commands:
            result = _run_subprocess(cmd, needs_sudo=True, timeout=600)
            if not result["ok"]:
                ctx.warn(f"Could not install git: {describe_failure(result)}")
                return

    # ── Pipeline steps ──────────────────────────────────────────

    def installed_version(self, target: InstallTarget, ctx: InstallContext) -> str | None:
        nvm = detect_nvm(str(self.nvm_dir(target)))
        versions = nvm["available_versions"]
        if target.resolved_version in versions:
            return target.resolved_version
        return versions[0] if versions else None

    def artifacts(self, target: InstallTarget, ctx: InstallContext) -> list[Artifact]:
        if detect_nvm(str(self.nvm_dir(target)))["installed"]:
            return []
        template = ctx.region.endpoints.get("nvm_install_script")
        if not template:
            raise InstallFailed("No nvm install script endpoint configured")
        url = template.format(nvm_version=ctx.settings.node.nvm_version)
        return [Artifact(name=NVM_SCRIPT, url=url)]

    def install(
        self,
        target: InstallTarget,
        files: dict[str, Path],
        ctx: InstallContext,
    ) -> dict[str, str]:
        nvm_dir = self.nvm_dir(target)
        version = target.version

        self._ensure_git(ctx)

        if NVM_SCRIPT in files:
            ctx.info(f"Installing nvm {ctx.settings.node.nvm_version} into {nvm_dir}")
            nvm_dir.mkdir(parents=True, exist_ok=True)
            result = _run_subprocess(
                ["bash", str(files[NVM_SCRIPT])],
                # PROFILE=/dev/null keeps nvm's installer out of the profiles
                env_overrides={"NVM_DIR": str(nvm_dir), "PROFILE": "/dev/null"},
                timeout=600,
            )
            if not result["ok"]:
                raise InstallFailed(f"nvm installation failed: {describe_failure(result)}")
        if not detect_nvm(str(nvm_dir))["installed"]:
            raise InstallFailed(f"nvm.sh not found in {nvm_dir}")

        ctx.info(f"Installing Node.js {version}...")
        result = self._nvm(target, ctx, f"nvm install {shlex.quote(version)}")
        if not result["ok"]:
            raise InstallFailed(
                f"Failed to install Node.js {version}: {describe_failure(result)}",
                hint="The mirror may lag upstream; retry with --region primary"
                if ctx.region.is_mirror else "",
            )

        result = self._nvm(target, ctx, f"nvm alias default {shlex.quote(version)}", timeout=60)
        if not result["ok"]:
            ctx.warn(f"Could not set Node.js {version} as nvm default")

        npm_global = expand(ctx.settings.node.npm_global_dir)
        return {
            "NVM_DIR": str(nvm_dir),
            "PATH": f"{nvm_dir}/versions/node/v{version}/bin:{npm_global}/bin:$PATH",
            **self.mirror_env(ctx),
        }

    def configure(self, target: InstallTarget, ctx: InstallContext) -> None:
        if ctx.options.get("no_npm_config"):
            ctx.info("Skipping npm configuration (--no-npm-config)")
            return

        npm_global = expand(ctx.settings.node.npm_global_dir)
        desired = {"prefix": str(npm_global)}
        if ctx.region.is_mirror:
            for key, extra in _NPMRC_MIRROR_KEYS.items():
                value = ctx.region.endpoints.get(extra)
                if value:
                    desired[key] = value

        try:
            npm_global.mkdir(parents=True, exist_ok=True)
            added = merge_npmrc(expand("~/.npmrc"), desired)
        except OSError as exc:
            ctx.warn(f"npm configuration failed: {exc}")
            return
        if added:
            ctx.info(f"npm configured: {', '.join(sorted(added))}")

    def profile_block(self, target: InstallTarget, ctx: InstallContext) -> ProfileEditBlock:
        lines = [
            _shell_config_line(env_var=("NVM_DIR", shell_path(target.install_dir))),
            '[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"',
            '[ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"',
        ]
        if not ctx.options.get("no_npm_config"):
            lines.append(_shell_config_line(
                path_entry=f"{shell_path(ctx.settings.node.npm_global_dir)}/bin",
            ))
        for key, value in self.mirror_env(ctx).items():
            lines.append(_shell_config_line(env_var=(key, value)))
        return ProfileEditBlock(
            marker=PROFILE_MARKER,
            lines=lines,
            legacy_windows=LEGACY_NODE_WINDOWS,
        )

    def verify(self, target: InstallTarget, ctx: InstallContext) -> VerificationResult:
        env = ctx.env
        node_version = get_tool_version("node", env=env)
        result = VerificationResult(
            found_on_path=which("node", env) is not None,
            reported_version=node_version or "",
        )
        if not node_version:
            return result

        if node_version != target.version:
            result.warnings.append(
                f"node on PATH reports {node_version}, expected {target.version}"
            )

        npm = which("npm", env)
        if not get_tool_version("npm", env=env) or not npm:
            result.warnings.append("npm not found next to node")
            result.smoke_test_passed = False
            return result

        smoke = _run_subprocess([npm, "list", "-g", "--depth=0"],
                                env_overrides=env, timeout=60)
        result.smoke_test_passed = smoke["ok"]
        if not smoke["ok"]:
            result.warnings.append("npm may have issues, but installation completed")
        return result

    def usage_hints(self, target: InstallTarget, ctx: InstallContext) -> list[str]:
        hints = [
            "Environment:",
            f"  NVM_DIR={self.nvm_dir(target)}",
            f"  npm global packages: {expand(ctx.settings.node.npm_global_dir)}",
            "",
            "Restart your terminal or run:",
            "  source ~/.bashrc",
            "",
            "Common commands:",
            "  node --version              # Check Node.js version",
            "  npm --version               # Check npm version",
            "  nvm list                    # List installed Node.js versions",
            "  nvm install <version>       # Install specific Node.js version",
            "  nvm use <version>           # Switch to specific version",
            "  npm install -g <package>    # Install global package",
        ]
        if ctx.region.is_mirror and ctx.region.endpoints.get("npm_registry"):
            hints += ["", f"npm registry: {ctx.region.endpoints.get('npm_registry')}"]
        return hints
